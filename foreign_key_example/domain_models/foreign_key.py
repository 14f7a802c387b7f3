# ==============================================================================
# FOREIGN KEY MODELS - One / Many / ToOne
# ==============================================================================
# A parent record (One) referenced by two child tables
# ==============================================================================

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from improved_api.database.base import SQLBase


class One(SQLBase):
    """
    Parent side of the relationship.

    Deleting a One removes its Many rows through the database cascade.

    Relationships:
        manies: Child records (never loaded implicitly)
    """

    __tablename__ = "ones"

    one_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    one_property01: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    one_property02: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    manies: Mapped[List["Many"]] = relationship(
        "Many",
        back_populates="one",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )


class Many(SQLBase):
    """
    Child record; always loaded with its parent.
    """

    __tablename__ = "manies"

    many_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    one_id: Mapped[int] = mapped_column(
        ForeignKey("ones.one_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    many_property01: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    one: Mapped["One"] = relationship(
        "One",
        back_populates="manies",
        lazy="selectin",
    )


class ToOne(SQLBase):
    """Read-only record pointing at a One."""

    __tablename__ = "to_ones"

    to_one_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    one_id: Mapped[int] = mapped_column(
        ForeignKey("ones.one_id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    to_one_property01: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    one: Mapped["One"] = relationship("One", lazy="selectin")
