"""Role-based access control (RBAC) rules for post mutation."""

from typing import Protocol
from uuid import UUID

from app.errors.auth import ForbiddenError
from app.schemas.auth import Identity

# Define role hierarchy (higher index = more permissions)
ROLE_HIERARCHY = {
    "user": 0,
    "moderator": 1,
    "admin": 2,
}

PRIVILEGED_ROLE = "admin"


class Owned(Protocol):
    author_id: UUID


def has_role_or_higher(user_role: str, required_role: str) -> bool:
    """
    Check if user has the required role or higher.

    Args:
        user_role: User's current role
        required_role: Required role for access

    Returns:
        bool: True if user has required role or higher
    """
    user_level = ROLE_HIERARCHY.get(user_role, 0)
    required_level = ROLE_HIERARCHY.get(required_role, 0)
    return user_level >= required_level


def is_owner_or_admin(identity: Identity, resource: Owned) -> bool:
    """Whether `identity` authored `resource` or holds the privileged role."""
    return identity.id == resource.author_id or has_role_or_higher(
        identity.role,
        PRIVILEGED_ROLE,
    )


def check_owner_or_admin(identity: Identity, resource: Owned, action: str = "modify") -> None:
    """
    Guard a mutation on an owned resource.

    Args:
        identity: Authenticated caller.
        resource: Anything carrying an ``author_id``.
        action: Verb used in the denial message.

    Raises:
        ForbiddenError: If the caller is neither the author nor an admin.
    """
    if not is_owner_or_admin(identity, resource):
        raise ForbiddenError(f"Access denied, you can only {action} your own posts")
