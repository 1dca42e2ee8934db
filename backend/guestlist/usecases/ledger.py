from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Sequence

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..domain.errors import (
    CapacityExceededError,
    DuplicateGuestError,
    GuestNotFoundError,
    InternalError,
    TableNotFoundError,
)
from ..domain.repositories import GuestRepository, TableRepository
from ..domain.services import (
    TableSnapshot,
    compute_available_seats,
    validate_additional_guests,
    validate_guest_name,
    validate_party_size,
    validate_seating,
    validate_table,
    validate_table_id,
)
from ..models import Guest, Table


class CapacityLedger:
    """
    Seating rules for tables and guests.

    Every operation runs against the repositories it was built with; callers own the
    transaction. Arrivals lock the guest row and then its table row before reading the
    current total, so concurrent arrivals at one table are applied one after another.
    """

    def __init__(
        self,
        tables: TableRepository,
        guests: GuestRepository,
        *,
        logger: logging.Logger | None = None,
        strict_table_occupancy: bool = False,
    ) -> None:
        self.tables = tables
        self.guests = guests
        self.logger = logger or logging.getLogger(__name__)
        self.strict_table_occupancy = strict_table_occupancy

    @contextmanager
    def _storage(self, failure: str, **context: Any) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.logger.exception("storage failure: %s %s", failure, context)
            raise InternalError(f"failed to {failure} at this time, please retry later") from exc

    async def _snapshot(self, table: Table, *, exclude_name: str | None = None) -> TableSnapshot:
        occupied = 0
        if self.strict_table_occupancy:
            occupied = await self.guests.sum_accompanying(table.id, exclude_name=exclude_name)
        return TableSnapshot(
            table_id=table.id,
            capacity=table.capacity,
            allowed_extras=table.allowed_extras,
            occupied_by_others=occupied,
        )

    async def create_table(self, capacity: int, allowed_extras: int = 0) -> Table:
        validate_table(capacity=capacity, allowed_extras=allowed_extras)
        with self._storage("create table", capacity=capacity, allowed_extras=allowed_extras):
            table = await self.tables.create(capacity=capacity, allowed_extras=allowed_extras)
        self.logger.info("table created id=%s ceiling=%s", table.id, table.ceiling)
        return table

    async def register_guest(self, name: str, table_id: int, accompanying_guests: int) -> Guest:
        validate_guest_name(name)
        validate_party_size(accompanying_guests)
        validate_table_id(table_id)

        with self._storage("find table", table_id=table_id):
            table = await self.tables.get(table_id, for_update=self.strict_table_occupancy)
        if table is None:
            raise TableNotFoundError("table does not exist")

        with self._storage("add guest", name=name, table_id=table_id):
            snapshot = await self._snapshot(table)
            validate_seating(snapshot, party_size=accompanying_guests)
            if await self.guests.get_by_name(name) is not None:
                raise DuplicateGuestError(f"guest with name {name} is already on the guest list")
            try:
                guest = await self.guests.create(
                    name=name,
                    table_id=table.id,
                    accompanying_guests=accompanying_guests,
                )
            except IntegrityError as exc:
                # Another request registered the same name after the check above.
                raise DuplicateGuestError(f"guest with name {name} is already on the guest list") from exc
        self.logger.info(
            "guest registered name=%s table_id=%s accompanying_guests=%s",
            guest.name,
            guest.table_id,
            guest.accompanying_guests,
        )
        return guest

    async def guest_arrives(self, name: str, additional_accompanying_guests: int) -> Guest:
        """
        Add `additional_accompanying_guests` to the guest's running total.

        The check is against the table ceiling (minus the other guests at the table in
        strict mode); on success the stored count is overwritten with the new total and
        the guest is re-read, so the returned object carries the updated count.
        """
        validate_guest_name(name)
        validate_additional_guests(additional_accompanying_guests)

        with self._storage("find guest", name=name):
            guest = await self.guests.get_by_name(name, for_update=True)
        if guest is None:
            raise GuestNotFoundError(f"guest with name {name} not found")

        with self._storage("onboard guests", name=name, table_id=guest.table_id):
            table = await self.tables.get(guest.table_id, for_update=True)
            if table is None:
                self.logger.error("guest %s references missing table %s", name, guest.table_id)
                raise InternalError("failed to find table at this time, please retry later")

            previous = guest.accompanying_guests
            new_total = previous + additional_accompanying_guests
            snapshot = await self._snapshot(table, exclude_name=name)
            try:
                validate_seating(snapshot, party_size=new_total)
            except CapacityExceededError:
                raise CapacityExceededError("this table has reached the maximum allowed guests") from None

            if await self.guests.update_accompanying(name, new_total) == 0:
                self.logger.error("arrival update for guest %s affected no rows", name)
                raise InternalError("failed to onboard guests at this time, please retry later")
            updated = await self.guests.get_by_name(name)
        if updated is None:
            raise InternalError("failed to onboard guests at this time, please retry later")

        self.logger.info(
            "guest arrived name=%s accompanying_guests=%s->%s",
            name,
            previous,
            updated.accompanying_guests,
        )
        return updated

    async def guest_leaves(self, name: str) -> None:
        validate_guest_name(name)
        with self._storage("remove guest", name=name):
            guest = await self.guests.get_by_name(name, for_update=True)
            if guest is None:
                raise GuestNotFoundError(f"guest with name {name} not found")
            if await self.guests.soft_delete(name) == 0:
                self.logger.error("departure of guest %s affected no rows", name)
                raise InternalError("failed to remove guest at this time, please retry later")
        self.logger.info("guest left name=%s freed=%s", name, guest.accompanying_guests)

    async def available_seats(self) -> int:
        with self._storage("count seats"):
            tables = await self.tables.list_all()
            guests = await self.guests.list_all()
        return compute_available_seats(
            (table.capacity + table.allowed_extras for table in tables),
            (guest.accompanying_guests for guest in guests),
        )

    async def list_guests(self) -> Sequence[Guest]:
        with self._storage("search guests"):
            return await self.guests.list_all()

    async def list_arrived_guests(self) -> Sequence[Guest]:
        # No separate arrival flag: every active guest counts as arrived.
        return await self.list_guests()
