import logging
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .config import get_settings
from .database import async_session
from .infrastructure.repositories import SqlAlchemyGuestRepository, SqlAlchemyTableRepository
from .usecases.ledger import CapacityLedger

ledger_logger = logging.getLogger("guestlist.ledger")


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session() as session:
        yield session


async def get_ledger(session: AsyncSession = Depends(get_session)) -> CapacityLedger:
    return CapacityLedger(
        SqlAlchemyTableRepository(session),
        SqlAlchemyGuestRepository(session),
        logger=ledger_logger,
        strict_table_occupancy=get_settings().strict_table_occupancy,
    )
