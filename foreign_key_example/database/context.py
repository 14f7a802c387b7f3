# ==============================================================================
# EXAMPLE DB CONTEXT
# ==============================================================================

from __future__ import annotations

from improved_api.database.context import ImprovedDbContext

from foreign_key_example.domain_models import Category, Many, One, ToOne


class ExampleContext(ImprovedDbContext):
    """Context holding the categories and the One/Many/ToOne tables."""

    def on_model_creating(self) -> None:
        self.register_model("categories", Category)
        self.register_model("ones", One)
        self.register_model("manies", Many)
        self.register_model("to_ones", ToOne)
