from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_ledger, get_session
from ..domain.errors import LedgerError
from ..schemas import TableCreate, TableRead
from ..usecases.ledger import CapacityLedger
from ..utils.audit_log import emit_audit_log
from .errors import audit_failed, to_http_error

router = APIRouter(prefix="/tables", tags=["tables"])


@router.post("", response_model=TableRead)
async def create_table(
    payload: TableCreate,
    session: AsyncSession = Depends(get_session),
    ledger: CapacityLedger = Depends(get_ledger),
) -> TableRead:
    async with session.begin():
        try:
            table = await ledger.create_table(payload.capacity, payload.allowed_extras)
        except LedgerError as exc:
            raise to_http_error(exc) from exc
        try:
            emit_audit_log(
                action="table.created",
                table_id=table.id,
                extra={"capacity": table.capacity, "allowed_extras": table.allowed_extras},
            )
        except RuntimeError as exc:
            raise audit_failed() from exc

    return TableRead.from_db(table=table)
