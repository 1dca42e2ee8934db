from fastapi import APIRouter, Depends

from ..deps import get_ledger
from ..domain.errors import LedgerError
from ..schemas import SeatsEmpty
from ..usecases.ledger import CapacityLedger
from .errors import to_http_error

router = APIRouter(prefix="", tags=["seats"])


@router.get("/seats_empty", response_model=SeatsEmpty)
async def seats_empty(ledger: CapacityLedger = Depends(get_ledger)) -> SeatsEmpty:
    try:
        seats = await ledger.available_seats()
    except LedgerError as exc:
        raise to_http_error(exc) from exc
    return SeatsEmpty(seats_empty=seats)
