# ==============================================================================
# BASE MODEL - SQLAlchemy Foundation
# ==============================================================================
# Declarative base shared by every entity registered with a db context
# ==============================================================================

from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase


class SQLBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy entities.

    Entities declare their own primary key, so records keep the
    integer identifiers the relational schema hands out.

    Example:
        >>> class Category(SQLBase):
        ...     __tablename__ = "categories"
        ...     category_id: Mapped[int] = mapped_column(primary_key=True)
    """

    def to_dict(self) -> dict[str, Any]:
        """
        Convert model instance to dictionary.

        Returns:
            Dictionary with all column values
        """
        return {
            column.key: getattr(self, column.key)
            for column in self.__mapper__.column_attrs
        }

    @classmethod
    def primary_key_name(cls) -> str:
        """Attribute name of the (single column) primary key."""
        mapper = inspect(cls)
        return mapper.get_property_by_column(mapper.primary_key[0]).key

    def __repr__(self) -> str:
        """Generate readable representation."""
        key = self.primary_key_name()
        return f"<{self.__class__.__name__}({key}={getattr(self, key, None)})>"
