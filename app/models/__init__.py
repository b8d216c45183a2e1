"""Database models for the application."""

from app.models.post import POST_STATUSES, PostDB
from app.models.user import UserDB

__all__ = ["POST_STATUSES", "PostDB", "UserDB"]
