import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import get_settings
from .database import create_schema
from .routers import guest_list, guests, seats, tables
from .utils.log_config import configure_logging
from .utils.request_id import REQUEST_ID_HEADER, generate_request_id, set_request_id

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.auto_create_schema:
        await create_schema()
        logger.info("database schema ensured")
    yield


async def request_id_middleware(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
    set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        set_request_id(None)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("rejected malformed request %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "request body is not valid JSON with integer values"},
    )


app = FastAPI(title="Guest List API", lifespan=lifespan)
app.middleware("http")(request_id_middleware)
app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(tables.router)
app.include_router(guest_list.router)
app.include_router(guests.router)
app.include_router(seats.router)
