from datetime import datetime, timezone
from typing import AsyncIterator, List, Optional

import pytest
import pytest_asyncio
from guestlist.models import Base, Guest, Table
from guestlist.usecases.ledger import CapacityLedger
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


def _utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture
def storage_error() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class FakeTableRepo:
    def __init__(self) -> None:
        self.rows: List[Table] = []
        self.locked: List[int] = []
        self.fail: Optional[Exception] = None

    async def create(self, *, capacity: int, allowed_extras: int) -> Table:
        if self.fail:
            raise self.fail
        table = Table(
            id=len(self.rows) + 1,
            capacity=capacity,
            allowed_extras=allowed_extras,
            created_at=_utc_now_naive(),
        )
        self.rows.append(table)
        return table

    async def get(self, table_id: int, *, for_update: bool = False) -> Optional[Table]:
        if self.fail:
            raise self.fail
        if for_update:
            self.locked.append(table_id)
        return next((t for t in self.rows if t.id == table_id), None)

    async def list_all(self) -> List[Table]:
        if self.fail:
            raise self.fail
        return list(self.rows)


class FakeGuestRepo:
    def __init__(self) -> None:
        self.rows: List[Guest] = []
        self.locked: List[str] = []
        self.fail: Optional[Exception] = None

    def _active(self) -> List[Guest]:
        return [g for g in self.rows if g.deleted_at is None]

    async def create(self, *, name: str, table_id: int, accompanying_guests: int) -> Guest:
        if self.fail:
            raise self.fail
        if any(g.active_name == name for g in self._active()):
            raise IntegrityError("INSERT INTO guests", {}, Exception("uq_guests_active_name"))
        guest = Guest(
            id=len(self.rows) + 1,
            name=name,
            active_name=name,
            table_id=table_id,
            accompanying_guests=accompanying_guests,
            created_at=_utc_now_naive(),
        )
        self.rows.append(guest)
        return guest

    async def get_by_name(
        self,
        name: str,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Optional[Guest]:
        if self.fail:
            raise self.fail
        if for_update:
            self.locked.append(name)
        pool = self.rows if include_deleted else self._active()
        matches = [g for g in pool if g.name == name]
        return matches[-1] if matches else None

    async def update_accompanying(self, name: str, accompanying_guests: int) -> int:
        matches = [g for g in self._active() if g.name == name]
        for guest in matches:
            guest.accompanying_guests = accompanying_guests
        return len(matches)

    async def soft_delete(self, name: str) -> int:
        matches = [g for g in self._active() if g.name == name]
        for guest in matches:
            guest.deleted_at = _utc_now_naive()
            guest.active_name = None
        return len(matches)

    async def list_all(self, *, include_deleted: bool = False) -> List[Guest]:
        if self.fail:
            raise self.fail
        return list(self.rows if include_deleted else self._active())

    async def sum_accompanying(self, table_id: int, *, exclude_name: Optional[str] = None) -> int:
        return sum(
            g.accompanying_guests
            for g in self._active()
            if g.table_id == table_id and g.name != exclude_name
        )


@pytest.fixture
def table_repo() -> FakeTableRepo:
    return FakeTableRepo()


@pytest.fixture
def guest_repo() -> FakeGuestRepo:
    return FakeGuestRepo()


@pytest.fixture
def ledger(table_repo: FakeTableRepo, guest_repo: FakeGuestRepo) -> CapacityLedger:
    return CapacityLedger(table_repo, guest_repo)


@pytest.fixture
def strict_ledger(table_repo: FakeTableRepo, guest_repo: FakeGuestRepo) -> CapacityLedger:
    return CapacityLedger(table_repo, guest_repo, strict_table_occupancy=True)


@pytest_asyncio.fixture
async def sessionmaker() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    await engine.dispose()
