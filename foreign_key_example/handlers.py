# ==============================================================================
# REQUEST HANDLERS
# ==============================================================================
# Command handlers discovered by the mediator at startup
# ==============================================================================

from __future__ import annotations

from improved_api.mediator.commands import (
    CreateEntityHandler,
    DeleteEntityHandler,
    UpdateEntityHandler,
)

from foreign_key_example.database.repositories import (
    CategoryRepository,
    ManyRepository,
    OneRepository,
)
from foreign_key_example.schemas import (
    CreateCategoryCommand,
    CreateManyCommand,
    CreateOneCommand,
    DeleteCategoryCommand,
    DeleteManyCommand,
    DeleteOneCommand,
    UpdateCategoryCommand,
    UpdateManyCommand,
    UpdateOneCommand,
)


# ==============================================================================
# CATEGORY
# ==============================================================================

class CreateCategoryHandler(CreateEntityHandler):
    request_type = CreateCategoryCommand
    repository_class = CategoryRepository


class UpdateCategoryHandler(UpdateEntityHandler):
    request_type = UpdateCategoryCommand
    repository_class = CategoryRepository


class DeleteCategoryHandler(DeleteEntityHandler):
    request_type = DeleteCategoryCommand
    repository_class = CategoryRepository


# ==============================================================================
# ONE
# ==============================================================================

class CreateOneHandler(CreateEntityHandler):
    request_type = CreateOneCommand
    repository_class = OneRepository


class UpdateOneHandler(UpdateEntityHandler):
    request_type = UpdateOneCommand
    repository_class = OneRepository


class DeleteOneHandler(DeleteEntityHandler):
    """Deleting a One removes its Many and ToOne rows (ON DELETE CASCADE)."""

    request_type = DeleteOneCommand
    repository_class = OneRepository


# ==============================================================================
# MANY
# ==============================================================================

class CreateManyHandler(CreateEntityHandler):
    request_type = CreateManyCommand
    repository_class = ManyRepository


class UpdateManyHandler(UpdateEntityHandler):
    request_type = UpdateManyCommand
    repository_class = ManyRepository


class DeleteManyHandler(DeleteEntityHandler):
    request_type = DeleteManyCommand
    repository_class = ManyRepository
