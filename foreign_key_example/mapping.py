# ==============================================================================
# MAPPING PROFILE
# ==============================================================================

from __future__ import annotations

from improved_api.mapping.profile import Profile

from foreign_key_example.domain_models import Many, ToOne
from foreign_key_example.schemas import ManyQueryViewModel, ToOneViewModel


def describe_many(many: Many) -> str:
    return (
        f"ManyID: {many.many_id}/OneID: {many.one_id}/"
        f"ManyProperty01: {many.many_property01}/"
        f"OneProperty01: {many.one.one_property01}"
    )


class MappingProfile(Profile):
    """Entity to view model maps of the example application."""

    def configure(self) -> None:
        self.create_map(Many, ManyQueryViewModel).for_member(
            "custom_property", describe_many
        )
        self.create_map(ToOne, ToOneViewModel).for_member(
            "one_property01", lambda to_one: to_one.one.one_property01
        )
