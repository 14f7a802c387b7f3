"""Commands and view models of the example application."""

from foreign_key_example.schemas.category import (
    CategoryViewModel,
    CreateCategoryCommand,
    DeleteCategoryCommand,
    UpdateCategoryCommand,
)
from foreign_key_example.schemas.foreign_key import (
    CreateManyCommand,
    CreateOneCommand,
    DeleteManyCommand,
    DeleteOneCommand,
    ManyQueryViewModel,
    OneViewModel,
    ToOneViewModel,
    UpdateManyCommand,
    UpdateOneCommand,
)

__all__ = [
    "CategoryViewModel",
    "CreateCategoryCommand",
    "UpdateCategoryCommand",
    "DeleteCategoryCommand",
    "OneViewModel",
    "CreateOneCommand",
    "UpdateOneCommand",
    "DeleteOneCommand",
    "ManyQueryViewModel",
    "CreateManyCommand",
    "UpdateManyCommand",
    "DeleteManyCommand",
    "ToOneViewModel",
]
