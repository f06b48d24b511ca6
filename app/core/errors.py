"""
Error taxonomy and the handlers that turn errors into JSON responses.

Every error body has the shape {"error": <kind>, "message": <text>}, with an
optional "details" object.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.codec import CodecError
from app.core.database import is_busy, is_unique_violation

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    UNAUTHORIZED = "Unauthorized"
    INTERNAL_ERROR = "InternalError"
    BAD_REQUEST = "BadRequest"
    FORBIDDEN = "Forbidden"
    ALREADY_EXISTS = "AlreadyExists"


STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
}


class AppError(Exception):
    """Base application error."""
    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT


class UnauthorizedError(AppError):
    kind = ErrorKind.UNAUTHORIZED


class InternalError(AppError):
    kind = ErrorKind.INTERNAL_ERROR


class BadRequestError(AppError):
    kind = ErrorKind.BAD_REQUEST


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN


class AlreadyExistsError(AppError):
    kind = ErrorKind.ALREADY_EXISTS


def error_response(kind: ErrorKind, message: str, details: Optional[Dict[str, Any]] = None,
                   status_code: Optional[int] = None) -> JSONResponse:
    content: Dict[str, Any] = {"error": kind.value, "message": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code or STATUS_BY_KIND[kind], content=content)


def _kind_for_status(status_code: int) -> ErrorKind:
    for kind, code in STATUS_BY_KIND.items():
        if code == status_code:
            return kind
    if status_code < 500:
        return ErrorKind.BAD_REQUEST
    return ErrorKind.INTERNAL_ERROR


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc.kind, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return error_response(ErrorKind.BAD_REQUEST, _describe_validation(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(_kind_for_status(exc.status_code), str(exc.detail), status_code=exc.status_code)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    if is_unique_violation(exc):
        logger.warning("Unique constraint violated on %s %s: %s", request.method, request.url.path, exc.orig)
        return error_response(ErrorKind.CONFLICT, "Resource conflicts with an existing record")
    logger.error("Integrity error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(ErrorKind.INTERNAL_ERROR, "Database constraint violated")


async def operational_error_handler(request: Request, exc: OperationalError):
    logger.error("Database operational error on %s %s", request.method, request.url.path, exc_info=exc)
    if is_busy(exc):
        return error_response(
            ErrorKind.INTERNAL_ERROR,
            "Database is busy, retry the request",
            {"retryable": True},
        )
    return error_response(ErrorKind.INTERNAL_ERROR, "Database unavailable")


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(ErrorKind.INTERNAL_ERROR, "Database operation failed")


async def codec_error_handler(request: Request, exc: CodecError):
    logger.error("Malformed stored data on %s %s: %s", request.method, request.url.path, exc)
    return error_response(ErrorKind.INTERNAL_ERROR, "Stored data could not be read")


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(ErrorKind.INTERNAL_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the handlers. More specific SQLAlchemy errors win over
    SQLAlchemyError, and anything unmatched becomes a JSON InternalError.
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(OperationalError, operational_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(CodecError, codec_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
