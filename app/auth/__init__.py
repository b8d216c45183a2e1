"""Authentication and authorization module."""

from app.auth.permissions import (
    ROLE_HIERARCHY,
    check_owner_or_admin,
    has_role_or_higher,
    is_owner_or_admin,
)

__all__ = [
    "ROLE_HIERARCHY",
    "check_owner_or_admin",
    "has_role_or_higher",
    "is_owner_or_admin",
]
