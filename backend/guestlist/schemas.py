from typing import List

from pydantic import BaseModel, StrictInt

from .models import Guest, Table
from .utils.time import to_rfc1123


class TableCreate(BaseModel):
    capacity: StrictInt
    allowed_extras: StrictInt = 0


class TableRead(BaseModel):
    id: int
    capacity: int
    allowed_extras: int

    @classmethod
    def from_db(cls, *, table: Table) -> "TableRead":
        return cls(id=table.id, capacity=table.capacity, allowed_extras=table.allowed_extras)


class GuestCreate(BaseModel):
    table: StrictInt
    accompanying_guests: StrictInt


class GuestArrival(BaseModel):
    accompanying_guests: StrictInt


class GuestName(BaseModel):
    name: str


class GuestRead(BaseModel):
    name: str
    table: int
    accompanying_guests: int

    @classmethod
    def from_db(cls, *, guest: Guest) -> "GuestRead":
        return cls(name=guest.name, table=guest.table_id, accompanying_guests=guest.accompanying_guests)


class GuestList(BaseModel):
    guests: List[GuestRead]


class ArrivedGuestRead(BaseModel):
    name: str
    accompanying_guests: int
    time_arrived: str

    @classmethod
    def from_db(cls, *, guest: Guest) -> "ArrivedGuestRead":
        return cls(
            name=guest.name,
            accompanying_guests=guest.accompanying_guests,
            time_arrived=to_rfc1123(guest.created_at),
        )


class ArrivedGuestList(BaseModel):
    guests: List[ArrivedGuestRead]


class SeatsEmpty(BaseModel):
    seats_empty: int
