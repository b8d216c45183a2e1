# tests/posts/conftest.py
"""Pytest fixtures for post tests."""

from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import PostDB, UserDB
from app.repositories import PostRepository, UserRepository
from app.schemas import Identity
from app.services.post import PostService
from app.utils.helpers import slugify

CONTENT = "This body text is comfortably longer than the fifty character minimum."
BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


def make_post(
    author_id: UUID,
    title: str,
    *,
    content: str = CONTENT,
    status: str = "published",
    categories: Iterable[str] = (),
    tags: Iterable[str] = (),
    created_at: datetime | None = None,
    views: int = 0,
) -> PostDB:
    """Build a post row directly, bypassing the service."""
    created = created_at or BASE_TIME
    return PostDB(
        author_id=author_id,
        title=title,
        slug=slugify(title),
        content=content,
        status=status,
        categories=list(categories),
        tags=list(tags),
        views=views,
        published_at=created if status == "published" else None,
        created_at=created,
        updated_at=created,
    )


async def seed(session: AsyncSession, posts: Iterable[PostDB]) -> None:
    session.add_all(list(posts))
    await session.commit()


@pytest.fixture
def post_repo(session: AsyncSession) -> PostRepository:
    return PostRepository(session, "sqlite")


@pytest.fixture
def post_service(session: AsyncSession, post_repo: PostRepository) -> PostService:
    return PostService(post_repo, UserRepository(session))


@pytest.fixture
def author_identity(author: UserDB) -> Identity:
    return Identity(id=author.uuid, role=author.role)


@pytest.fixture
def other_identity(other_user: UserDB) -> Identity:
    return Identity(id=other_user.uuid, role=other_user.role)


@pytest.fixture
def admin_identity(admin_user: UserDB) -> Identity:
    return Identity(id=admin_user.uuid, role=admin_user.role)


@pytest.fixture
def create_posts(
    session: AsyncSession,
    author: UserDB,
) -> Callable[..., Awaitable[list[PostDB]]]:
    """Seed posts from keyword dicts; the author defaults to `author`."""

    async def _create(*rows: dict[str, Any]) -> list[PostDB]:
        posts = [
            make_post(row.pop("author_id", author.uuid), **row) for row in map(dict, rows)
        ]
        await seed(session, posts)
        return posts

    return _create


@pytest.fixture
async def twenty_five_posts(session: AsyncSession, author: UserDB) -> list[PostDB]:
    """25 published posts created one minute apart, oldest first."""
    posts = [
        make_post(
            author.uuid,
            f"Numbered post {i + 1:02d}",
            created_at=BASE_TIME + timedelta(minutes=i),
        )
        for i in range(25)
    ]
    await seed(session, posts)
    return posts
