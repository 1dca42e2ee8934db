import logging

from fastapi import HTTPException, status

from ..domain.errors import ErrorKind, LedgerError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_error(exc: LedgerError) -> HTTPException:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("internal ledger failure: %s", exc.message)
    return HTTPException(status_code=status_code, detail=exc.message)


def audit_failed() -> HTTPException:
    logger.exception("failed to emit audit log")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="audit log failed")
