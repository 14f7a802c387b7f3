# ==============================================================================
# DB CONTEXT - SQLAlchemy Async Engine & Entity Registry
# ==============================================================================
# Owns the engine, the session factory and the set of registered entities
# Subclasses declare their tables in on_model_creating()
# ==============================================================================

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional, Type

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from improved_api.core.exceptions import DatabaseError
from improved_api.core.settings import Settings, get_settings
from improved_api.database.base import SQLBase

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class ImprovedDbContext:
    """
    Database context using SQLAlchemy async.

    Subclass it once per application, register the entity sets in
    ``on_model_creating`` and, if needed, choose another connection in
    ``on_configuring``.

    Features:
        - Lazy, idempotent engine creation
        - Table creation for registered entities only
        - Foreign keys enforced on SQLite
        - Transactional session scope

    Example:
        >>> class ShopContext(ImprovedDbContext):
        ...     def on_model_creating(self):
        ...         self.register_model("products", Product)
        ...
        >>> context = ShopContext(settings)
        >>> await context.connect()
        >>> async with context.session() as session:
        ...     session.add(Product(name="Pen"))
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._model_registry: Dict[str, Type[SQLBase]] = {}
        self.on_model_creating()

    @property
    def settings(self) -> Settings:
        return self._settings

    # ==========================================================================
    # CONFIGURATION HOOKS
    # ==========================================================================

    def on_configuring(self) -> Dict[str, Any]:
        """
        Engine options for this context.

        Returns:
            Keyword arguments for ``create_async_engine``; the ``url`` key
            holds the connection string.
        """
        url = self._settings.async_database_url
        options: Dict[str, Any] = {
            "url": url,
            "echo": self._settings.DB_ECHO,
        }
        if url.startswith("sqlite"):
            options["connect_args"] = {"check_same_thread": False}
        return options

    def on_model_creating(self) -> None:
        """Register the entity sets of this context."""

    # ==========================================================================
    # MODEL REGISTRY
    # ==========================================================================

    def register_model(self, name: str, model: Type[SQLBase]) -> None:
        """
        Register an entity for this context.

        Args:
            name: Entity set identifier
            model: SQLAlchemy model class
        """
        self._model_registry[name] = model
        logger.debug(f"Registered model '{name}' -> {model.__name__}")

    def get_model(self, name: str) -> Type[SQLBase]:
        """
        Get registered model by entity set name.

        Raises:
            ValueError: If model not registered
        """
        if name not in self._model_registry:
            raise ValueError(
                f"Model '{name}' not registered. "
                f"Available models: {list(self._model_registry.keys())}"
            )
        return self._model_registry[name]

    @property
    def models(self) -> Dict[str, Type[SQLBase]]:
        return dict(self._model_registry)

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def connect(self) -> None:
        """
        Initialize database engine and create tables.

        Safe to call more than once; later calls are no-ops.
        """
        if self._engine is not None:
            return

        options = self.on_configuring()
        url = options.pop("url")

        try:
            engine = create_async_engine(url, **options)
            if engine.dialect.name == "sqlite":
                event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

            tables = [model.__table__ for model in self._model_registry.values()]
            async with engine.begin() as conn:
                await conn.run_sync(SQLBase.metadata.create_all, tables=tables)
        except Exception as e:
            logger.error(f"Failed to connect to database: {e}")
            raise DatabaseError(f"Database connection failed: {e}")

        self._engine = engine
        self._session_factory = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        logger.info(
            f"{self.__class__.__name__} connected "
            f"({len(tables)} tables, dialect={engine.dialect.name})"
        )

    async def disconnect(self) -> None:
        """Close database connections and dispose engine."""
        if self._engine:
            await self._engine.dispose()
            logger.info(f"{self.__class__.__name__} disconnected")
        self._engine = None
        self._session_factory = None

    async def health_check(self) -> bool:
        """
        Verify database connectivity.

        Returns:
            True if connection is healthy
        """
        if not self.is_connected:
            return False
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    # ==========================================================================
    # SESSION MANAGEMENT
    # ==========================================================================

    def new_session(self) -> AsyncSession:
        """
        Create a bare session; the caller owns commit and close.

        Raises:
            RuntimeError: If database not connected
        """
        if not self._session_factory:
            raise RuntimeError(
                "Database not connected. Call connect() first."
            )
        return self._session_factory()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Provide transactional session scope.

        Commits on successful exit, rolls back on exception.
        """
        session = self.new_session()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
