"""Error taxonomy and the handlers that turn errors into JSON responses."""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to an HTTP status."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return error_response(self.message, self.details)


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class InsufficientBalance(ValidationError):
    default_message = "Insufficient leave balance"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Duplicate entry - record already exists"


class ServerError(AppError):
    status_code = 500


class ServiceUnavailable(AppError):
    status_code = 503
    default_message = "Database connection lost"


class GatewayTimeout(AppError):
    status_code = 504
    default_message = "Database timeout"


def error_response(message: str, details: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": message}
    if details:
        payload["details"] = details
    return payload


def translate_database_error(exc: Exception) -> AppError:
    """Map a SQLAlchemy driver error onto the API error taxonomy."""
    if isinstance(exc, IntegrityError):
        return Conflict()
    if isinstance(exc, PoolTimeoutError):
        return GatewayTimeout()
    if isinstance(exc, (OperationalError, DisconnectionError)):
        return ServiceUnavailable()
    return ServerError()


def _field_errors(exc: RequestValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return messages


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content=error_response("Validation error", _field_errors(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "HTTP error"
        if exc.status_code == 404 and message == "Not Found":
            message = "Route not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityError)
    @app.exception_handler(OperationalError)
    @app.exception_handler(DisconnectionError)
    @app.exception_handler(PoolTimeoutError)
    async def database_error_handler(request: Request, exc: Exception) -> JSONResponse:
        translated = translate_database_error(exc)
        logger.warning(
            "Database error on %s %s: %s",
            request.method,
            request.url.path,
            exc.__class__.__name__,
        )
        return JSONResponse(status_code=translated.status_code, content=translated.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content=error_response("Internal Server Error"))
