# ==============================================================================
# GENERIC CRUD COMMANDS
# ==============================================================================
# Create / Update / Delete commands and their repository-backed handlers
# ==============================================================================

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional, Type

from pydantic import Field
from pydantic.json_schema import SkipJsonSchema

from improved_api.core.exceptions import NotFoundError, ValidationError
from improved_api.database.base import SQLBase
from improved_api.database.repositories import ImprovedRecordRepository
from improved_api.mediator.mediator import Request, RequestHandler


class CreateCommand(Request):
    """Command carrying the column values of a new entity."""


class UpdateCommand(Request):
    """
    Command carrying the columns to change.

    Only fields set by the client are applied. ``id`` comes from the
    route, never from the body.
    """

    id: SkipJsonSchema[Optional[Any]] = Field(default=None, exclude=True)


class DeleteCommand(Request):
    """Command deleting the entity with the given primary key."""

    id: Any


class EntityCommandHandler(RequestHandler[Any, Any]):
    """
    Base for handlers working on a single record repository.

    Attributes:
        repository_class: Record repository used for the entity
    """

    repository_class: ClassVar[Type[ImprovedRecordRepository]]

    @property
    def repository(self) -> ImprovedRecordRepository:
        return self.unit_of_work.repository(self.repository_class)

    def _not_found(self, id: Any) -> NotFoundError:
        name = self.repository_class.model.__name__
        return NotFoundError(
            message=f"{name} not found",
            resource_type=name,
            resource_id=id,
        )


class CreateEntityHandler(EntityCommandHandler):
    """Insert the entity, commit, and return it with its relationships."""

    def to_values(self, request: CreateCommand) -> Dict[str, Any]:
        return request.model_dump()

    async def handle(self, request: CreateCommand) -> SQLBase:
        entity = await self.repository.add(self.to_values(request))
        await self.unit_of_work.commit()
        key = getattr(entity, entity.primary_key_name())
        return await self.repository.get_by_id(key)


class UpdateEntityHandler(EntityCommandHandler):
    """Apply the fields set on the command to an existing entity."""

    def to_values(self, request: UpdateCommand) -> Dict[str, Any]:
        return request.model_dump(exclude_unset=True)

    def check_required(self, values: Dict[str, Any]) -> None:
        """Reject explicit nulls for NOT NULL columns."""
        columns = self.repository_class.model.__table__.columns
        errors = {
            name: "may not be null"
            for name, value in values.items()
            if value is None and name in columns and not columns[name].nullable
        }
        if errors:
            raise ValidationError(errors=errors)

    async def handle(self, request: UpdateCommand) -> SQLBase:
        values = self.to_values(request)
        self.check_required(values)
        entity = await self.repository.get_by_id(request.id)
        if entity is None:
            raise self._not_found(request.id)
        await self.repository.update(entity, values)
        await self.unit_of_work.commit()
        return await self.repository.get_by_id(request.id)


class DeleteEntityHandler(EntityCommandHandler):
    """Delete an entity by primary key."""

    async def handle(self, request: DeleteCommand) -> bool:
        if not await self.repository.remove_by_id(request.id):
            raise self._not_found(request.id)
        await self.unit_of_work.commit()
        return True
