from __future__ import annotations

from typing import List

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..domain.repositories import GuestRepository, TableRepository
from ..models import Guest, Table
from ..utils.time import utc_now_naive


class SqlAlchemyTableRepository(TableRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, capacity: int, allowed_extras: int) -> Table:
        table = Table(
            capacity=capacity,
            allowed_extras=allowed_extras,
            created_at=utc_now_naive(),
        )
        self.session.add(table)
        await self.session.flush()
        return table

    async def get(self, table_id: int, *, for_update: bool = False) -> Table | None:
        stmt = select(Table).where(Table.id == table_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.scalar(stmt)
        return result if isinstance(result, Table) else None

    async def list_all(self) -> List[Table]:
        rows = await self.session.scalars(select(Table).order_by(Table.id))
        return list(rows.all())


class SqlAlchemyGuestRepository(GuestRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, *, name: str, table_id: int, accompanying_guests: int) -> Guest:
        guest = Guest(
            name=name,
            active_name=name,
            table_id=table_id,
            accompanying_guests=accompanying_guests,
            created_at=utc_now_naive(),
        )
        self.session.add(guest)
        await self.session.flush()
        return guest

    async def get_by_name(
        self,
        name: str,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Guest | None:
        stmt = select(Guest).where(Guest.name == name)
        if not include_deleted:
            stmt = stmt.where(Guest.deleted_at.is_(None))
        # Latest registration wins if an old row shares the name.
        stmt = stmt.order_by(Guest.id.desc()).limit(1)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.scalar(stmt)
        return result if isinstance(result, Guest) else None

    async def update_accompanying(self, name: str, accompanying_guests: int) -> int:
        stmt = (
            update(Guest)
            .where(Guest.name == name, Guest.deleted_at.is_(None))
            .values(accompanying_guests=accompanying_guests)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    async def soft_delete(self, name: str) -> int:
        stmt = (
            update(Guest)
            .where(Guest.name == name, Guest.deleted_at.is_(None))
            .values(deleted_at=utc_now_naive(), active_name=None)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return int(result.rowcount or 0)

    async def list_all(self, *, include_deleted: bool = False) -> List[Guest]:
        stmt = select(Guest).order_by(Guest.id)
        if not include_deleted:
            stmt = stmt.where(Guest.deleted_at.is_(None))
        rows = await self.session.scalars(stmt)
        return list(rows.all())

    async def sum_accompanying(self, table_id: int, *, exclude_name: str | None = None) -> int:
        stmt = select(func.coalesce(func.sum(Guest.accompanying_guests), 0)).where(
            Guest.table_id == table_id,
            Guest.deleted_at.is_(None),
        )
        if exclude_name is not None:
            stmt = stmt.where(Guest.name != exclude_name)
        return int(await self.session.scalar(stmt) or 0)
