"""Authentication and authorization errors."""

from logging import getLogger

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from app.errors.base import BaseAppError, create_exception_handler

logger = getLogger(__name__)


class AuthenticationError(BaseAppError):
    """Raised when the bearer credentials cannot be resolved to a user."""

    def __init__(self, detail: str = "Could not validate credentials") -> None:
        super().__init__(detail, HTTP_401_UNAUTHORIZED)


class ForbiddenError(BaseAppError):
    """Raised when the caller may not act on the resource."""

    def __init__(self, detail: str = "Access denied") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
