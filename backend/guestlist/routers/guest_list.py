from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_ledger, get_session
from ..domain.errors import LedgerError
from ..schemas import GuestCreate, GuestList, GuestName, GuestRead
from ..usecases.ledger import CapacityLedger
from ..utils.audit_log import emit_audit_log
from .errors import audit_failed, to_http_error

router = APIRouter(prefix="/guest_list", tags=["guest_list"])


@router.post("/{name}", response_model=GuestName)
async def register_guest(
    payload: GuestCreate,
    name: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    ledger: CapacityLedger = Depends(get_ledger),
) -> GuestName:
    async with session.begin():
        try:
            guest = await ledger.register_guest(name, payload.table, payload.accompanying_guests)
        except LedgerError as exc:
            raise to_http_error(exc) from exc
        try:
            emit_audit_log(
                action="guest.registered",
                table_id=guest.table_id,
                guest_name=guest.name,
                accompanying_guests=guest.accompanying_guests,
            )
        except RuntimeError as exc:
            raise audit_failed() from exc

    return GuestName(name=guest.name)


@router.get("", response_model=GuestList)
async def list_guests(ledger: CapacityLedger = Depends(get_ledger)) -> GuestList:
    try:
        guests = await ledger.list_guests()
    except LedgerError as exc:
        raise to_http_error(exc) from exc
    return GuestList(guests=[GuestRead.from_db(guest=guest) for guest in guests])
