# ==============================================================================
# CONTROLLERS
# ==============================================================================
# Routes: /api/Category, /api/One, /api/Many, /api/ToOne
# ==============================================================================

from __future__ import annotations

from improved_api.api.controllers import ImprovedController, ImprovedQueryController

from foreign_key_example.database.repositories import (
    CategoryRepository,
    ManyRepository,
    OneRepository,
    ToOneRepository,
)
from foreign_key_example.schemas import (
    CategoryViewModel,
    CreateCategoryCommand,
    CreateManyCommand,
    CreateOneCommand,
    DeleteCategoryCommand,
    DeleteManyCommand,
    DeleteOneCommand,
    ManyQueryViewModel,
    OneViewModel,
    ToOneViewModel,
    UpdateCategoryCommand,
    UpdateManyCommand,
    UpdateOneCommand,
)


class CategoryController(ImprovedController):
    """Categories: create, read, update and delete."""

    repository = CategoryRepository
    view_model = CategoryViewModel
    create_command = CreateCategoryCommand
    update_command = UpdateCategoryCommand
    delete_command = DeleteCategoryCommand


class OneController(ImprovedController):
    """
    Parent side of the foreign key example.

    Deleting a One also deletes its Many and ToOne records.
    """

    repository = OneRepository
    view_model = OneViewModel
    create_command = CreateOneCommand
    update_command = UpdateOneCommand
    delete_command = DeleteOneCommand


class ManyController(ImprovedController):
    """
    Child side of the foreign key example.

    Responses carry ``custom_property`` built from the Many and its One.
    """

    repository = ManyRepository
    view_model = ManyQueryViewModel
    create_command = CreateManyCommand
    update_command = UpdateManyCommand
    delete_command = DeleteManyCommand
    filter_fields = ("one_id",)


class ToOneController(ImprovedQueryController):
    """Read-only records pointing at a One; open to anonymous callers."""

    repository = ToOneRepository
    view_model = ToOneViewModel
    filter_fields = ("one_id",)
    allow_anonymous = True
