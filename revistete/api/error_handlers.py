"""Global exception handlers.

Every failure leaves the API as ``{"success": false, "message": ...}``,
with an ``errors`` list for per-field validation problems.
"""

import logging

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from revistete.core.config import settings
from revistete.core.errors import AppError, TransientError, UnhandledError, ValidationError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    _register_app_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_transient_error_handler(app)
    _register_generic_error_handler(app)


def _register_app_error_handler(app: FastAPI) -> None:

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"{exc.code}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Validation error on {request.url.path}: {exc.errors()}")
        error = ValidationError(errors=_field_errors(exc))
        return JSONResponse(status_code=error.status_code, content=error.to_response())


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )


def _register_transient_error_handler(app: FastAPI) -> None:

    async def transient_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Upstream timeout on {request.url.path}: {exc}",
            extra={"error_code": TransientError.code, "path": request.url.path},
        )
        error = TransientError()
        return JSONResponse(status_code=error.status_code, content=error.to_response())

    for exc_class in (OperationalError, PoolTimeoutError, httpx.TimeoutException):
        app.add_exception_handler(exc_class, transient_error_handler)


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": UnhandledError.code, "path": request.url.path},
        )
        error = UnhandledError(detail=repr(exc) if settings.DEBUG else None)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error.to_response(),
        )


def _field_errors(exc: RequestValidationError) -> list:
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"] if loc not in ("body", "query", "path", "form")),
            "message": e["msg"],
        }
        for e in exc.errors()
    ]
