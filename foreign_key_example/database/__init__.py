from foreign_key_example.database.context import ExampleContext
from foreign_key_example.database.repositories import (
    CategoryRepository,
    ManyRepository,
    OneRepository,
    ToOneRepository,
)

__all__ = [
    "ExampleContext",
    "CategoryRepository",
    "OneRepository",
    "ManyRepository",
    "ToOneRepository",
]
