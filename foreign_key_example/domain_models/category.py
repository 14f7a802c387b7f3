# ==============================================================================
# CATEGORY MODEL
# ==============================================================================

from __future__ import annotations

from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from improved_api.database.base import SQLBase


class Category(SQLBase):
    """
    Standalone catalog category.

    Attributes:
        category_id: Primary key
        name: Display name
        description: Optional long text
    """

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
