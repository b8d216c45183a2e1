"""User repository: read access to the user/profile subsystem."""

from collections.abc import Iterable
from typing import cast
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import ColumnElement

from app.errors.database import ConflictError, InfrastructureError
from app.models.user import UserDB


class UserRepository:
    """
    Repository for User database operations.

    The post core only needs lookups: resolving an identity and loading
    author display data for a batch of posts.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
        """
        self.session = session

    async def create(self, user: UserDB) -> UserDB:
        """
        Persist a user row (used by seeding scripts and tests).

        Raises:
            ConflictError: If username or email already exists
            InfrastructureError: For other integrity errors
        """
        try:
            self.session.add(user)
            await self.session.flush()
            await self.session.refresh(user)
            return user
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "username" in error_msg.lower() or "email" in error_msg.lower():
                raise ConflictError(f"User '{user.username}' already exists") from e
            raise InfrastructureError(error=f"Database integrity error: {error_msg}") from e

    async def get_by_id(self, user_id: UUID) -> UserDB | None:
        """
        Get user by ID.

        Args:
            user_id: User UUID

        Returns:
            UserDB | None: User if found, None otherwise
        """
        result = await self.session.execute(
            select(UserDB).where(cast(ColumnElement[bool], UserDB.uuid == user_id)),
        )
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: Iterable[UUID]) -> dict[UUID, UserDB]:
        """
        Load several users in one query.

        Args:
            user_ids: IDs to resolve; duplicates are fine

        Returns:
            dict[UUID, UserDB]: Found users keyed by ID (missing IDs omitted)
        """
        ids = set(user_ids)
        if not ids:
            return {}
        result = await self.session.execute(
            # pyrefly: ignore [missing-attribute]
            select(UserDB).where(UserDB.uuid.in_(ids)),
        )
        return {user.uuid: user for user in result.scalars().all()}
