# ==============================================================================
# FOREIGN KEY SCHEMAS - One / Many / ToOne
# ==============================================================================
# Commands and view models for the one-to-many example
# ==============================================================================

from __future__ import annotations

from typing import Optional

from pydantic import Field

from improved_api.mediator.commands import CreateCommand, DeleteCommand, UpdateCommand
from improved_api.schemas.base import BaseSchema


# ==============================================================================
# ONE
# ==============================================================================

class CreateOneCommand(CreateCommand):
    one_property01: str = Field(..., min_length=1, max_length=100)
    one_property02: Optional[int] = Field(None)


class UpdateOneCommand(UpdateCommand):
    one_property01: Optional[str] = Field(None, min_length=1, max_length=100)
    one_property02: Optional[int] = Field(None)


class DeleteOneCommand(DeleteCommand):
    pass


class OneViewModel(BaseSchema):
    one_id: int
    one_property01: str
    one_property02: Optional[int] = None


# ==============================================================================
# MANY
# ==============================================================================

class CreateManyCommand(CreateCommand):
    """Create a Many under an existing One."""

    one_id: int = Field(..., description="Parent One identifier")
    many_property01: str = Field(..., min_length=1, max_length=100)


class UpdateManyCommand(UpdateCommand):
    """Update a Many; moving it to another One is allowed."""

    one_id: Optional[int] = Field(None, description="Parent One identifier")
    many_property01: Optional[str] = Field(None, min_length=1, max_length=100)


class DeleteManyCommand(DeleteCommand):
    pass


class ManyQueryViewModel(BaseSchema):
    """
    Many response with a summary of the record and its parent.
    """

    many_id: int
    one_id: int
    many_property01: str
    custom_property: Optional[str] = Field(
        None,
        description="ManyID/OneID/ManyProperty01/OneProperty01 summary",
    )


# ==============================================================================
# TO ONE
# ==============================================================================

class ToOneViewModel(BaseSchema):
    to_one_id: int
    one_id: int
    to_one_property01: str
    one_property01: Optional[str] = Field(None, description="Property of the parent One")
