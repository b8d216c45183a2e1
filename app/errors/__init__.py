from app.errors.auth import AuthenticationError, ForbiddenError, auth_exception_handler
from app.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_envelope,
)
from app.errors.database import (
    ConflictError,
    DatabaseConnectionError,
    InfrastructureError,
    NotFoundError,
    database_exception_handler,
)
from app.errors.validation import ValidationError, validation_exception_handler

__all__ = [
    "AuthenticationError",
    "BaseAppError",
    "ConflictError",
    "DatabaseConnectionError",
    "ForbiddenError",
    "InfrastructureError",
    "NotFoundError",
    "ValidationError",
    "auth_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "error_envelope",
    "validation_exception_handler",
]
