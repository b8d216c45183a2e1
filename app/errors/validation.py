"""Custom validation error handling for FastAPI."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from app.errors.base import BaseAppError, error_envelope
from app.utils.helpers import host

logger = getLogger(__name__)


class ValidationError(BaseAppError):
    """Raised when input is malformed or out of range."""

    def __init__(
        self,
        detail: str = "Validation failed",
        error: str | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST, error=error)


def format_validation_errors(exc: RequestValidationError) -> str:
    """
    Flatten pydantic errors to ``field: message`` pairs.

    The leading location segment (``body`` or ``query``) is dropped.
    """
    parts = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error.get("loc", [])[1:])
        message = error.get("msg", "Invalid value")
        parts.append(f"{field}: {message}" if field else message)
    return "; ".join(parts)


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle Pydantic validation errors with the standard envelope.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    summary = format_validation_errors(cast(RequestValidationError, exc))

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {summary}",
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content=error_envelope("Validation failed", summary),
    )
