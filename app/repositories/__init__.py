"""Repository layer for database operations."""

from app.repositories.post import PostRepository
from app.repositories.query_builder import PostQueryBuilder
from app.repositories.user import UserRepository

__all__ = ["PostQueryBuilder", "PostRepository", "UserRepository"]
