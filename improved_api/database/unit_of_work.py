# ==============================================================================
# UNIT OF WORK - Transaction Coordination
# ==============================================================================
# Groups repository operations into one committed transaction
# One instance per HTTP request
# ==============================================================================

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Type, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from improved_api.core.exceptions import TransactionError
from improved_api.database.context import ImprovedDbContext

if TYPE_CHECKING:
    from improved_api.database.repositories import ImprovedRepository

RepositoryType = TypeVar("RepositoryType", bound="ImprovedRepository")

logger = logging.getLogger(__name__)


class ImprovedUnitOfWork:
    """
    Concrete Unit of Work over a db context.

    Every repository obtained from the same unit of work shares one
    session, so their changes are committed or discarded together.
    Nothing is committed implicitly: leaving the context without
    ``commit()`` discards pending changes, leaving it with an exception
    rolls back.

    Example:
        >>> async with ImprovedUnitOfWork(context) as uow:
        ...     repo = uow.repository(OneRepository)
        ...     await repo.add(One(one_property01="x"))
        ...     await uow.commit()
    """

    def __init__(self, context: ImprovedDbContext) -> None:
        self._context = context
        self._repositories: Dict[type, Any] = {}
        self._session: Optional[AsyncSession] = None

    @property
    def context(self) -> ImprovedDbContext:
        return self._context

    @property
    def session(self) -> AsyncSession:
        """
        Active session.

        Raises:
            TransactionError: If used outside ``async with``
        """
        if self._session is None:
            raise TransactionError(
                "Unit of work is not active. Use it as 'async with uow:'."
            )
        return self._session

    @property
    def is_active(self) -> bool:
        """Check if unit of work has an active session."""
        return self._session is not None

    # ==========================================================================
    # REPOSITORY MANAGEMENT
    # ==========================================================================

    def repository(self, repository_class: Type[RepositoryType]) -> RepositoryType:
        """
        Get the repository of the given class bound to this unit of work.

        Instances are cached, so repeated calls return the same object.
        """
        if repository_class not in self._repositories:
            self._repositories[repository_class] = repository_class(self)
        return self._repositories[repository_class]

    def has_repository(self, repository_class: type) -> bool:
        return repository_class in self._repositories

    # ==========================================================================
    # CONTEXT MANAGEMENT
    # ==========================================================================

    async def __aenter__(self) -> "ImprovedUnitOfWork":
        if self._session is not None:
            raise TransactionError("Unit of work is already active")
        self._session = self._context.new_session()
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Any,
    ) -> None:
        try:
            if exc_type:
                await self.rollback()
        finally:
            if self._session is not None:
                await self._session.close()
            self._session = None
            self._repositories.clear()

    async def commit(self) -> None:
        """
        Commit the transaction.

        Errors roll the session back and are re-raised unchanged, so
        the error middleware can classify them.
        """
        try:
            await self.session.commit()
        except Exception:
            logger.warning("Commit failed, rolling back", exc_info=True)
            await self.session.rollback()
            raise

    async def rollback(self) -> None:
        """Rollback the transaction."""
        if self._session is not None:
            await self._session.rollback()
