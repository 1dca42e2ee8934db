from dataclasses import dataclass
from typing import Any, Iterable

from .errors import CapacityExceededError, ValidationError


@dataclass(frozen=True)
class TableSnapshot:
    table_id: int
    capacity: int
    allowed_extras: int
    # Seats held by other active guests at the table; only counted in strict mode.
    occupied_by_others: int = 0

    @property
    def ceiling(self) -> int:
        return self.capacity + self.allowed_extras


# Largest values the INTEGER and BIGINT columns hold.
MAX_SEATS = 2**31 - 1
MAX_TABLE_ID = 2**63 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_table(*, capacity: Any, allowed_extras: Any) -> None:
    if not _is_int(capacity) or capacity <= 0 or capacity > MAX_SEATS:
        raise ValidationError(f"capacity must be an integer between 1 and {MAX_SEATS}")
    if not _is_int(allowed_extras) or allowed_extras < 0 or allowed_extras > MAX_SEATS:
        raise ValidationError(f"allowed_extras must be an integer between 0 and {MAX_SEATS}")


def validate_table_id(table_id: Any) -> None:
    if not _is_int(table_id) or abs(table_id) > MAX_TABLE_ID:
        raise ValidationError("table must be an integer id")


def validate_guest_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name is empty")
    return name


def validate_party_size(accompanying_guests: Any) -> None:
    if not _is_int(accompanying_guests) or accompanying_guests <= 0 or accompanying_guests > MAX_SEATS:
        raise ValidationError(f"accompanying guests size must be an integer between 1 and {MAX_SEATS}")


def validate_additional_guests(additional: Any) -> None:
    if not _is_int(additional) or additional < 0 or additional > MAX_SEATS:
        raise ValidationError(f"accompanying guests must be an integer between 0 and {MAX_SEATS}")


def validate_seating(snapshot: TableSnapshot, *, party_size: int) -> int:
    """
    Pure check that a party of `party_size` fits the table.
    Returns the seats left at the table afterwards, raises CapacityExceededError otherwise.
    """
    if party_size > MAX_SEATS:
        raise ValidationError(f"accompanying guests total must not exceed {MAX_SEATS}")
    remaining = snapshot.ceiling - snapshot.occupied_by_others
    if party_size > remaining:
        raise CapacityExceededError(f"no seats available for table: {snapshot.table_id}")
    return remaining - party_size


def compute_available_seats(ceilings: Iterable[int], parties: Iterable[int]) -> int:
    # Never clamped: a negative value means the seating rules were bypassed somewhere.
    return sum(ceilings) - sum(parties)
