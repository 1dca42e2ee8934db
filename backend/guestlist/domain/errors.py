from enum import StrEnum


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INTERNAL = "internal"


class LedgerError(Exception):
    """Base for every failure the capacity ledger reports to its callers."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(LedgerError):
    kind = ErrorKind.VALIDATION


class DuplicateGuestError(ValidationError):
    pass


class NotFoundError(LedgerError):
    kind = ErrorKind.NOT_FOUND


class TableNotFoundError(NotFoundError):
    pass


class GuestNotFoundError(NotFoundError):
    pass


class CapacityExceededError(LedgerError):
    kind = ErrorKind.CAPACITY_EXCEEDED


class InternalError(LedgerError):
    kind = ErrorKind.INTERNAL
