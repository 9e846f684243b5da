"""
Error taxonomy shared by the auth and chat services.

Handlers and helpers raise these instead of building HTTPExceptions inline;
`register_exception_handlers` turns them into JSON responses with the right
status code. Messages on these errors are client-safe: anything more specific
belongs in the log, not in the response.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PlatformError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Any] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[dict]:
        return None

    def to_dict(self) -> dict:
        body = {"detail": self.message}
        if self.details is not None:
            body["errors"] = self.details
        return body


class ValidationError(PlatformError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(PlatformError):
    """Bad credentials at login. Never says which field was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class AuthorizationError(PlatformError):
    """Missing, malformed, expired or otherwise invalid bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    @property
    def headers(self) -> Optional[dict]:
        return {"WWW-Authenticate": "Bearer"}


class PermissionDeniedError(PlatformError):
    """Authenticated, but not allowed to touch this resource."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class NotFoundError(PlatformError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(PlatformError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class StoreError(PlatformError):
    """Transient or internal failure of the backing store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


async def platform_error_handler(request: Request, exc: PlatformError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Request bodies that fail schema validation are plain 400s, same as any
    # other ValidationError raised by a handler.
    error = ValidationError(details=jsonable_encoder(exc.errors()))
    return await platform_error_handler(request, error)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that map the taxonomy above onto HTTP responses."""
    app.add_exception_handler(PlatformError, platform_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
