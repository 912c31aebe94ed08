"""Error Handlers - global exception handlers for the Plub API.

Invariants:
    - Every error body is the envelope {statusCode, message, data}
    - PlubError -> its kind's HTTP status and status code
    - Framework HTTP errors with a mapped kind use that kind's HTTP status;
      unmapped ones keep their own status under COMMON_BAD_REQUEST
    - RequestValidationError -> 400 / INVALID_INPUT_VALUE with field-level details
    - Exception (catch-all) -> 500 / INTERNAL_SERVER_ERROR, never leaks internal details

Design Decisions:
    - Four-layer handler: domain (PlubError), validation (Pydantic), routing
      (Starlette HTTPException), catch-all (Exception)
    - Kept out of main.py so the app module only wires things together
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from plub.core.errors import ErrorKind, PlubError

logger = logging.getLogger(__name__)

_HTTP_KINDS = {
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorKind.METHOD_NOT_ALLOWED,
    status.HTTP_413_CONTENT_TOO_LARGE: ErrorKind.FILE_SIZE_EXCEEDED,
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_plub_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_plub_error_handler(app: FastAPI) -> None:

    @app.exception_handler(PlubError)
    async def plub_error_handler(request: Request, exc: PlubError):
        """Handle all Plub domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"PlubError: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        kind = _HTTP_KINDS.get(exc.status_code)
        http_status = kind.http_status if kind else exc.status_code
        kind = kind or ErrorKind.COMMON_BAD_REQUEST
        logger.warning(
            f"HTTP {exc.status_code} on {request.url.path}: {exc.detail}",
        )
        return JSONResponse(
            status_code=http_status,
            content={
                "statusCode": kind.status_code,
                "message": str(exc.detail) if exc.detail else kind.message,
                "data": None,
            },
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all - never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=PlubError(ErrorKind.INTERNAL_SERVER_ERROR).to_response(),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Envelope whose data lists the offending fields."""
    kind = ErrorKind.INVALID_INPUT_VALUE
    return {
        "statusCode": kind.status_code,
        "message": kind.message,
        "data": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
