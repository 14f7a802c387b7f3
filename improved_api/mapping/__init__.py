"""Object-to-view-model mapping profiles."""

from improved_api.mapping.mapper import Mapper
from improved_api.mapping.profile import Profile, TypeMap

__all__ = ["Mapper", "Profile", "TypeMap"]
