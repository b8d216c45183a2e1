from logging import getLogger

from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.errors.base import BaseAppError, create_exception_handler

logger = getLogger(__name__)


class InfrastructureError(BaseAppError):
    """Base exception for store and other infrastructure faults."""

    def __init__(
        self,
        detail: str = "Something went wrong!",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        error: str | None = None,
    ) -> None:
        super().__init__(detail, status_code, error)


class DatabaseConnectionError(InfrastructureError):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
        error: str | None = None,
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR, error)


class ConflictError(BaseAppError):
    """Exception raised when a unique constraint is violated."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
        error: str | None = None,
    ) -> None:
        super().__init__(detail, HTTP_409_CONFLICT, error)


class NotFoundError(BaseAppError):
    """Exception raised when a record is not found."""

    def __init__(
        self,
        detail: str = "Record not found",
        error: str | None = None,
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND, error)


database_exception_handler = create_exception_handler(logger)
