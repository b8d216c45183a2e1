from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.configs.settings import DEFAULT_ERROR_MESSAGE
from app.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        error: str | None = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code
        self.error = error

    def __str__(self) -> str:
        return self.detail


def expose_error_details(request: Request) -> bool:
    """Internal error text is only echoed back outside production."""
    settings = getattr(request.app.state, "settings", None)
    return settings is not None and not settings.is_production


def error_envelope(message: str, error: str | None = None) -> dict[str, object]:
    """Build the `success: false` response body."""
    content: dict[str, object] = {"success": False, "message": message}
    if error:
        content["error"] = error
    return content


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        # Default values
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        detail = "Internal Server Error"
        error = None

        # Extract from custom exception if available
        if hasattr(exc, "status_code"):
            status_code = exc.status_code
        if hasattr(exc, "detail"):
            detail = exc.detail
        if status_code < HTTP_500_INTERNAL_SERVER_ERROR or expose_error_details(request):
            error = getattr(exc, "error", None)

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        return ORJSONResponse(content=error_envelope(detail, error), status_code=status_code)

    return handler


def create_unhandled_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create the last-resort handler that hides unexpected faults.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.error(
            f"Unhandled {type(exc).__name__} for ip: {host(request)} "
            f"for endpoint {request.url.path}",
            exc_info=exc,
        )
        error = str(exc) if expose_error_details(request) else None
        return ORJSONResponse(
            content=error_envelope(DEFAULT_ERROR_MESSAGE, error),
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return handler
