"""Global exception handlers for consistent error responses.

Usage:
    from libs.common.error_handler import add_exception_handlers

    app = FastAPI()
    add_exception_handlers(app)
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from libs.common.errors import (
    ClubError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from libs.common.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_CONTENT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
)


def status_for(exc: ClubError) -> int:
    for error_cls, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def club_error_handler(request: Request, exc: ClubError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "Rejected %s %s: %s", request.method, request.url.path, exc.message
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind, "errors": exc.errors},
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Map every domain error to its HTTP status."""
    app.add_exception_handler(ClubError, club_error_handler)
