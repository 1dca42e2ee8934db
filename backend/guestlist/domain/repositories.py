from __future__ import annotations

from typing import Protocol, Sequence

from ..models import Guest, Table


class TableRepository(Protocol):
    async def create(self, *, capacity: int, allowed_extras: int) -> Table: ...

    async def get(self, table_id: int, *, for_update: bool = False) -> Table | None: ...

    async def list_all(self) -> Sequence[Table]: ...


class GuestRepository(Protocol):
    async def create(self, *, name: str, table_id: int, accompanying_guests: int) -> Guest: ...

    async def get_by_name(
        self,
        name: str,
        *,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Guest | None: ...

    async def update_accompanying(self, name: str, accompanying_guests: int) -> int: ...

    async def soft_delete(self, name: str) -> int: ...

    async def list_all(self, *, include_deleted: bool = False) -> Sequence[Guest]: ...

    async def sum_accompanying(self, table_id: int, *, exclude_name: str | None = None) -> int: ...
