from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_ledger, get_session
from ..domain.errors import LedgerError
from ..schemas import ArrivedGuestList, ArrivedGuestRead, GuestArrival, GuestName
from ..usecases.ledger import CapacityLedger
from ..utils.audit_log import emit_audit_log
from .errors import audit_failed, to_http_error

router = APIRouter(prefix="/guests", tags=["guests"])


@router.put("/{name}", response_model=GuestName)
async def guest_arrives(
    payload: GuestArrival,
    name: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    ledger: CapacityLedger = Depends(get_ledger),
) -> GuestName:
    async with session.begin():
        try:
            guest = await ledger.guest_arrives(name, payload.accompanying_guests)
        except LedgerError as exc:
            raise to_http_error(exc) from exc
        try:
            emit_audit_log(
                action="guest.arrived",
                table_id=guest.table_id,
                guest_name=guest.name,
                accompanying_guests=guest.accompanying_guests,
                accompanying_from=guest.accompanying_guests - payload.accompanying_guests,
            )
        except RuntimeError as exc:
            raise audit_failed() from exc

    return GuestName(name=guest.name)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def guest_leaves(
    name: str = Path(..., min_length=1),
    session: AsyncSession = Depends(get_session),
    ledger: CapacityLedger = Depends(get_ledger),
) -> Response:
    async with session.begin():
        try:
            await ledger.guest_leaves(name)
        except LedgerError as exc:
            raise to_http_error(exc) from exc
        try:
            emit_audit_log(action="guest.left", guest_name=name)
        except RuntimeError as exc:
            raise audit_failed() from exc

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=ArrivedGuestList)
async def list_arrived_guests(ledger: CapacityLedger = Depends(get_ledger)) -> ArrivedGuestList:
    try:
        guests = await ledger.list_arrived_guests()
    except LedgerError as exc:
        raise to_http_error(exc) from exc
    return ArrivedGuestList(guests=[ArrivedGuestRead.from_db(guest=guest) for guest in guests])
