# ==============================================================================
# CATEGORY SCHEMAS
# ==============================================================================
# Commands and view model for categories
# ==============================================================================

from __future__ import annotations

from typing import Optional

from pydantic import Field

from improved_api.mediator.commands import CreateCommand, DeleteCommand, UpdateCommand
from improved_api.schemas.base import BaseSchema


class CreateCategoryCommand(CreateCommand):
    """Create a category."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name",
    )
    description: Optional[str] = Field(
        None,
        max_length=500,
        description="Category description",
    )


class UpdateCategoryCommand(UpdateCommand):
    """Update a category."""

    name: Optional[str] = Field(
        None,
        min_length=1,
        max_length=100,
        description="Category name",
    )
    description: Optional[str] = Field(
        None,
        max_length=500,
        description="Category description",
    )


class DeleteCategoryCommand(DeleteCommand):
    """Delete a category."""


class CategoryViewModel(BaseSchema):
    """Category response."""

    category_id: int = Field(..., description="Category identifier")
    name: str = Field(..., description="Category name")
    description: Optional[str] = Field(None, description="Category description")
