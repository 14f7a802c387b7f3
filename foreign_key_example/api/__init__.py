from foreign_key_example.api.controllers import (
    CategoryController,
    ManyController,
    OneController,
    ToOneController,
)

__all__ = [
    "CategoryController",
    "OneController",
    "ManyController",
    "ToOneController",
]
