"""Mediator-based command dispatch."""

from improved_api.mediator.commands import (
    CreateCommand,
    CreateEntityHandler,
    DeleteCommand,
    DeleteEntityHandler,
    UpdateCommand,
    UpdateEntityHandler,
)
from improved_api.mediator.mediator import (
    Mediator,
    Request,
    RequestHandler,
    ScopedMediator,
)

__all__ = [
    "Mediator",
    "Request",
    "RequestHandler",
    "ScopedMediator",
    "CreateCommand",
    "UpdateCommand",
    "DeleteCommand",
    "CreateEntityHandler",
    "UpdateEntityHandler",
    "DeleteEntityHandler",
]
