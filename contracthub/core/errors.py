"""
Error taxonomy & JSON envelope.

Services and RBAC dependencies raise `AppError` subclasses; the handlers
registered by `register_exception_handlers` turn them into

    {"success": false, "error": "<message>", "code": "<CODE>", "details": ...}

Anything that is not an AppError is logged and reported as Internal;
detail is only exposed in development.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from contracthub.core.config import settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    code: str = "APP_ERROR"
    message: str = "Application error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    details: Any | None = None
    headers: dict[str, str] | None = None

    def __init__(
        self,
        message: str | None = None,
        *,
        details: Any | None = None,
    ):
        if message is not None:
            self.message = message
        if details is not None:
            self.details = details
        super().__init__(self.message)


class AuthenticationMissing(AppError):
    code = "AUTHENTICATION_REQUIRED"
    message = "Authentication required"
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class AuthenticationInvalid(AppError):
    code = "AUTHENTICATION_INVALID"
    message = "Invalid or expired token"
    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationDenied(AppError):
    code = "AUTHORIZATION_DENIED"
    message = "Insufficient permissions"
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFound(AppError):
    code = "NOT_FOUND"
    message = "Resource not found"
    status_code = status.HTTP_404_NOT_FOUND


class ValidationFailed(AppError):
    code = "VALIDATION_FAILED"
    message = "Validation failed"
    status_code = status.HTTP_400_BAD_REQUEST


class Conflict(AppError):
    code = "CONFLICT"
    message = "Resource conflict"
    status_code = status.HTTP_409_CONFLICT


class RateLimited(AppError):
    code = "RATE_LIMITED"
    message = "Too many requests, please try again later"
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


class Internal(AppError):
    code = "INTERNAL_ERROR"
    message = "Internal server error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# ── Envelope helpers ─────────────────────────────────────────────────


def error_payload(message: str, code: str, details: Any | None = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "error": message, "code": code}
    if details is not None:
        payload["details"] = details
    return payload


def error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.message, exc.code, exc.details),
        headers=exc.headers,
    )


_CODE_BY_STATUS: dict[int, type[AppError]] = {
    status.HTTP_400_BAD_REQUEST: ValidationFailed,
    status.HTTP_401_UNAUTHORIZED: AuthenticationInvalid,
    status.HTTP_403_FORBIDDEN: AuthorizationDenied,
    status.HTTP_404_NOT_FOUND: ResourceNotFound,
    status.HTTP_409_CONFLICT: Conflict,
    status.HTTP_429_TOO_MANY_REQUESTS: RateLimited,
}


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into [{field, message}], without the `body`/`query` prefix."""
    fields = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append({"field": ".".join(loc) or "request", "message": err.get("msg", "Invalid value")})
    return fields


# ── Handlers ─────────────────────────────────────────────────────────


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("[%s] %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    else:
        logger.info("[%s] %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return error_response(exc)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationFailed(details=_field_errors(exc)))


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        return error_response(ResourceNotFound("Route not found"))
    error_cls = _CODE_BY_STATUS.get(exc.status_code, Internal)
    message = exc.detail if isinstance(exc.detail, str) else error_cls.message
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(message, error_cls.code),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if settings.is_development else Internal.message
    return error_response(Internal(message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(SQLAlchemyError, handle_unexpected_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
