from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql.sqltypes import BigInteger, DateTime, Integer, String

# SQLite only autoincrements INTEGER PRIMARY KEY columns.
Id = BigInteger().with_variant(Integer(), "sqlite")


class Base(DeclarativeBase):
    pass


class Table(Base):
    __tablename__ = "tables"
    __table_args__ = (
        CheckConstraint("capacity >= 1", name="chk_tables_capacity"),
        CheckConstraint("allowed_extras >= 0", name="chk_tables_allowed_extras"),
    )

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    allowed_extras: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=False), nullable=True)

    guests: Mapped[list["Guest"]] = relationship(back_populates="table")

    @property
    def ceiling(self) -> int:
        return self.capacity + self.allowed_extras


class Guest(Base):
    __tablename__ = "guests"
    __table_args__ = (
        CheckConstraint("accompanying_guests >= 0", name="chk_guests_accompanying"),
        Index("idx_guests_name", "name"),
        Index("idx_guests_table", "table_id"),
        # NULL for departed guests, so only active names collide.
        UniqueConstraint("active_name", name="uq_guests_active_name"),
    )

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    active_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    table_id: Mapped[int] = mapped_column(ForeignKey("tables.id"), nullable=False)
    accompanying_guests: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=False), nullable=True)

    table: Mapped["Table"] = relationship(back_populates="guests")
