# ==============================================================================
# REPOSITORIES - Generic Data Access Abstraction
# ==============================================================================
# Query repository (reads) and record repository (reads + writes)
# Both operate on the session of the unit of work they are bound to
# ==============================================================================

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    Generic,
    Iterable,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
)

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from improved_api.database.base import SQLBase

if TYPE_CHECKING:
    from improved_api.database.unit_of_work import ImprovedUnitOfWork

ModelType = TypeVar("ModelType", bound=SQLBase)


class ImprovedRepository(Generic[ModelType]):
    """
    Read-only repository over a single entity.

    Subclasses only set ``model``.

    Attributes:
        model: SQLAlchemy entity class
        _uow: Unit of work providing the session

    Example:
        >>> class OneRepository(ImprovedRepository[One]):
        ...     model = One
        ...
        >>> repo = uow.repository(OneRepository)
        >>> await repo.get_all(limit=10, sort_by="one_id")
    """

    model: Type[ModelType]

    def __init__(self, unit_of_work: "ImprovedUnitOfWork") -> None:
        if getattr(self, "model", None) is None:
            raise TypeError(f"{self.__class__.__name__} must define 'model'")
        self._uow = unit_of_work

    @property
    def session(self) -> AsyncSession:
        return self._uow.session

    # ==========================================================================
    # QUERY HELPERS
    # ==========================================================================

    def _conditions(self, filters: Optional[Dict[str, Any]]) -> List[Any]:
        if not filters:
            return []
        columns = self.model.__mapper__.column_attrs
        return [
            getattr(self.model, key) == value
            for key, value in filters.items()
            if key in columns
        ]

    # ==========================================================================
    # QUERY OPERATIONS
    # ==========================================================================

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        """
        Retrieve entity by primary key.

        Returns:
            Entity if found (with eager relationships refreshed), None otherwise
        """
        return await self.session.get(self.model, id, populate_existing=True)

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> List[ModelType]:
        """
        Retrieve multiple entities with pagination.

        Args:
            skip: Number of records to skip
            limit: Maximum records to return
            filters: Field-value pairs (unknown fields are ignored)
            sort_by: Field to sort by (defaults to the primary key)
            sort_order: Sort direction ("asc" or "desc")
        """
        query = select(self.model)

        conditions = self._conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))

        if not sort_by or sort_by not in self.model.__mapper__.column_attrs:
            sort_by = self.model.primary_key_name()
        order_column = getattr(self.model, sort_by)
        if sort_order.lower() == "desc":
            order_column = order_column.desc()
        query = query.order_by(order_column).offset(skip).limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def find_one(self, filters: Dict[str, Any]) -> Optional[ModelType]:
        """Find a single entity matching filters."""
        results = await self.get_all(skip=0, limit=1, filters=filters)
        return results[0] if results else None

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count entities matching filters."""
        query = select(func.count()).select_from(self.model)
        conditions = self._conditions(filters)
        if conditions:
            query = query.where(and_(*conditions))
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def exists(self, id: Any) -> bool:
        """Check if entity exists by primary key."""
        return await self.get_by_id(id) is not None


class ImprovedRecordRepository(ImprovedRepository[ModelType]):
    """
    Repository with write operations.

    Writes are flushed so generated keys and constraint violations
    surface immediately; committing is left to the unit of work.
    """

    def _build(self, data: Dict[str, Any]) -> ModelType:
        columns = self.model.__mapper__.column_attrs
        return self.model(**{k: v for k, v in data.items() if k in columns})

    async def add(self, entity: Union[ModelType, Dict[str, Any]]) -> ModelType:
        """
        Add a new entity.

        Args:
            entity: Entity instance or a dict of column values
                (keys that are not columns are ignored)

        Returns:
            The persisted entity with its generated key
        """
        if isinstance(entity, dict):
            entity = self._build(entity)
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def add_range(
        self,
        entities: Iterable[Union[ModelType, Dict[str, Any]]],
    ) -> List[ModelType]:
        """Add several entities in one flush."""
        instances = [
            self._build(e) if isinstance(e, dict) else e
            for e in entities
        ]
        self.session.add_all(instances)
        await self.session.flush()
        return instances

    async def update(self, entity: ModelType, data: Dict[str, Any]) -> ModelType:
        """
        Apply column values to a tracked entity.

        Keys that are not columns of the entity are ignored.
        """
        columns = self.model.__mapper__.column_attrs
        for key, value in data.items():
            if key in columns:
                setattr(entity, key, value)
        await self.session.flush()
        return entity

    async def remove(self, entity: ModelType) -> None:
        """Delete a tracked entity."""
        await self.session.delete(entity)
        await self.session.flush()

    async def remove_by_id(self, id: Any) -> bool:
        """
        Delete an entity by primary key.

        Returns:
            True if deleted, False if not found
        """
        entity = await self.get_by_id(id)
        if entity is None:
            return False
        await self.remove(entity)
        return True
