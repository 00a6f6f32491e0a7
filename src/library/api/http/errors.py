"""Translation of domain errors into JSON error responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.responses import JSONResponse

from src.library.core.errors import (
    ConflictError,
    LibraryError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from src.library.runtime.config.config_data import ConfigData

LEGACY_ERROR_DETAIL = "Internal server error"

_STATUS_BY_ERROR: tuple[tuple[type[LibraryError], int], ...] = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreError, 500),
)


def status_for(exc: LibraryError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


def error_response(
    request: Request, status_code: int, detail: object, code: str
) -> JSONResponse:
    config: ConfigData = request.app.state.config
    request_id = _request_id(request)
    if config.app.legacy_error_mapping:
        return JSONResponse(
            status_code=500,
            content={"detail": LEGACY_ERROR_DETAIL, "request_id": request_id},
        )
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": code, "request_id": request_id},
    )


async def handle_library_error(request: Request, exc: LibraryError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.bind(status_code=status_code, error_type=type(exc).__name__, code=exc.code)
    if status_code >= 500:
        log.opt(exception=exc).error("request.store_error")
    else:
        log.info("request.rejected: {}", exc.message)
    return error_response(request, status_code, exc.message, exc.code)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = ", ".join(
        ".".join(str(part) for part in error["loc"]) for error in exc.errors()
    )
    logger.bind(status_code=400, error_type=type(exc).__name__).info(
        "request.validation_error: {}", fields
    )
    return error_response(
        request, 400, f"Invalid request for: {fields}", ValidationError.code
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LibraryError, handle_library_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
