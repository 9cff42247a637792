"""Domain errors and their HTTP mapping.

Learn: Services and auth dependencies raise these instead of
HTTPException, so the same code works from the CLI and from tests
without an HTTP layer. main.py registers the handlers below, which
turn any GameHoundError, request validation failure, or SQLAlchemy
error into {"error": message} with the matching status code.
"""

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger()


class GameHoundError(Exception):
    """Base class for errors rendered to API clients."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(GameHoundError):
    """A required field is missing or a value is not acceptable."""

    status_code = 400


class ConflictError(GameHoundError):
    """The record already exists (duplicate email)."""

    status_code = 400


class AuthError(GameHoundError):
    """Bad credentials, or a missing/invalid bearer token.

    Login failures use 400; a missing token 401; a bad token 403.
    """

    status_code = 400


class NotFoundError(GameHoundError):
    status_code = 404


class StorageError(GameHoundError):
    """Database failure — carries the driver's message through."""

    status_code = 500


async def gamehound_error_handler(request: Request, exc: GameHoundError) -> JSONResponse:
    headers = None
    if isinstance(exc, AuthError) and exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI body/path validation failures as a 400 ValidationError."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"error": "; ".join(parts) or "Invalid request"},
    )


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Any database failure becomes a 500 StorageError with the driver's message."""
    logger.exception("storage.error", error=str(exc))
    error = StorageError(str(exc.orig) if getattr(exc, "orig", None) else str(exc))
    return JSONResponse(status_code=error.status_code, content={"error": error.message})
