# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Must happen before anything imports app.configs, which loads settings once
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_TO_FILE"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-signing-tokens"

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from app.configs import Settings  # noqa: E402
from app.db import Database  # noqa: E402
from app.main import create_app  # noqa: E402
from app.managers.token_manager import create_access_token  # noqa: E402
from app.models import UserDB  # noqa: E402
from app.repositories import UserRepository  # noqa: E402


@pytest.fixture
def test_settings() -> Settings:
    """Settings for an isolated app on in-memory SQLite."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL="sqlite+aiosqlite://",
        LOG_TO_FILE=False,
        SECRET_KEY="test-secret-key-for-signing-tokens",
    )


@pytest.fixture
async def app(test_settings: Settings) -> AsyncGenerator[FastAPI]:
    """Fresh application with its own empty database."""
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest.fixture
def database(app: FastAPI) -> Database:
    return app.state.database


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession]:
    """Session on the app's database, for driving repositories directly."""
    async with database.session_maker() as db_session:
        yield db_session


async def _store_user(database: Database, user: UserDB) -> UserDB:
    async with database.transaction() as db_session:
        return await UserRepository(db_session).create(user)


@pytest.fixture
async def author(database: Database) -> UserDB:
    """A regular user who writes posts."""
    return await _store_user(
        database,
        UserDB(
            username="jane",
            email="jane@example.com",
            first_name="Jane",
            last_name="Doe",
            bio="Writes about software",
            role="user",
        ),
    )


@pytest.fixture
async def other_user(database: Database) -> UserDB:
    """A regular user who does not own the test posts."""
    return await _store_user(
        database,
        UserDB(username="mallory", email="mallory@example.com", role="user"),
    )


@pytest.fixture
async def admin_user(database: Database) -> UserDB:
    """An admin user."""
    return await _store_user(
        database,
        UserDB(username="root", email="root@example.com", role="admin"),
    )


def bearer_headers(user: UserDB, settings: Settings) -> dict[str, str]:
    token = create_access_token(
        user_id=user.uuid,
        username=user.username,
        settings=settings,
        expires_delta=timedelta(minutes=30),
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(author: UserDB, test_settings: Settings) -> dict[str, str]:
    """Auth headers for the post author."""
    return bearer_headers(author, test_settings)


@pytest.fixture
def other_auth_headers(other_user: UserDB, test_settings: Settings) -> dict[str, str]:
    return bearer_headers(other_user, test_settings)


@pytest.fixture
def admin_auth_headers(admin_user: UserDB, test_settings: Settings) -> dict[str, str]:
    return bearer_headers(admin_user, test_settings)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing."""
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
