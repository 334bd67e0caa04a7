"""Map domain errors and framework errors onto the JSON envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from api.responses import error_response
from domain.model.errors import (
    AuthenticationError,
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    NotFoundError,
    PermissionDeniedError,
    UnverifiedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses (InvalidTokenError, TokenExpiredError) resolve
# through InvalidCredentialsError.
_STATUS_BY_ERROR: list[tuple[type[DomainError], int, str]] = [
    (ValidationError, 422, "validation_error"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (InvalidCredentialsError, status.HTTP_400_BAD_REQUEST, "invalid_credentials"),
    (UnverifiedError, status.HTTP_403_FORBIDDEN, "unverified"),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, "unauthenticated"),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN, "forbidden"),
    (DuplicateError, status.HTTP_409_CONFLICT, "conflict"),
]


def status_for(exc: DomainError) -> tuple[int, str]:
    for error_type, status_code, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code, code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"


def register_exception_handlers(app: FastAPI) -> None:
    """Install envelope-producing handlers on the app."""

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        status_code, code = status_for(exc)
        log = logger.error if status_code >= 500 else logger.warning
        log("Request failed", extra={
            "path": request.url.path,
            "method": request.method,
            "status": status_code,
            "code": code,
            "error": str(exc),
        })
        if status_code >= 500:
            return error_response("Internal server error", {"code": code}, status_code)
        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return error_response(str(exc), {"code": code}, status_code, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        details = [
            {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
            for err in exc.errors()
        ]
        logger.warning("Invalid request body", extra={
            "path": request.url.path,
            "method": request.method,
            "errors": details,
        })
        return error_response(
            "Please provide all required fields.",
            {"code": "validation_error", "details": details},
            422,
        )

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP error", extra={
                "path": request.url.path,
                "status": exc.status_code,
                "error": str(exc.detail),
            })
        return error_response(str(exc.detail), None, exc.status_code, headers=exc.headers)

    @app.exception_handler(Exception)
    async def handle_uncaught(request: Request, exc: Exception):
        logger.exception("Unhandled exception", extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
        })
        return error_response(
            "Internal server error",
            {"code": "internal_error"},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
