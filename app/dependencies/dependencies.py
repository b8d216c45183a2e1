# app/dependencies/dependencies.py

"""Application dependencies: settings, repositories, services and identity."""

from typing import Annotated

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.configs import Settings
from app.configs.settings import DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE
from app.db import get_database, get_session
from app.errors.auth import AuthenticationError
from app.managers.token_manager import decode_access_token
from app.repositories import PostRepository, UserRepository
from app.schemas.auth import Identity
from app.schemas.post import PostListQuery, PostStatus, SortField, SortOrder
from app.services.post import PostService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_user_repository(session: SessionDep) -> UserRepository:
    """
    Resolve the `UserRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.

    Returns
    -------
    UserRepository
        Repository instance bound to the session.
    """
    return UserRepository(session)


def get_post_repository(session: SessionDep, request: Request) -> PostRepository:
    """
    Resolve the `PostRepository` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.
    request : Request
        Incoming request, used to find the database dialect.

    Returns
    -------
    PostRepository
        Repository instance bound to the session and its dialect.
    """
    return PostRepository(session, get_database(request).dialect)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


def get_post_service(posts: PostRepoDep, users: UserRepoDep) -> PostService:
    return PostService(posts, users)


PostServiceDep = Annotated[PostService, Depends(get_post_service)]


async def get_current_identity(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    users: UserRepoDep,
    settings: SettingsDep,
) -> Identity:
    """
    Resolve the caller from the bearer token.

    The token's ``user_id`` claim is looked up in the user store so that
    the role is always current.

    Parameters
    ----------
    token : str | None
        Bearer token, if one was sent.
    users : UserRepository
        User lookups.
    settings : Settings
        Token verification settings.

    Returns
    -------
    Identity
        Authenticated caller.

    Raises
    ------
    AuthenticationError
        If the token is missing, invalid or names an unknown user.
    """
    if not token:
        raise AuthenticationError("Not authenticated")

    token_data = decode_access_token(token, settings)
    if not token_data:
        raise AuthenticationError()

    user = await users.get_by_id(token_data.user_id)
    if not user:
        raise AuthenticationError("User not found")

    return Identity(id=user.uuid, role=user.role)


IdentityDep = Annotated[Identity, Depends(get_current_identity)]


def get_post_list_query(
    page: Annotated[
        int,
        Query(ge=1, le=MAX_PAGE, description="Page number, starting at 1"),
    ] = 1,
    limit: Annotated[
        int,
        Query(ge=1, le=MAX_PAGE_SIZE, description="Maximum number of posts per page"),
    ] = DEFAULT_PAGE_SIZE,
    search: Annotated[
        str | None,
        Query(max_length=200, description="Full-text search over title and content"),
    ] = None,
    category: Annotated[str | None, Query(description="Only posts in this category")] = None,
    tag: Annotated[str | None, Query(description="Only posts with this tag")] = None,
    status: Annotated[PostStatus, Query(description="Post status filter")] = "published",
    sort_by: Annotated[
        SortField,
        Query(alias="sortBy", description="Field to sort on"),
    ] = "createdAt",
    sort_order: Annotated[
        SortOrder,
        Query(alias="sortOrder", description="Sort direction"),
    ] = "desc",
) -> PostListQuery:
    """
    Dependency to construct `PostListQuery` from query parameters.

    Returns
    -------
    PostListQuery
        Aggregated query parameters object.
    """
    return PostListQuery(
        page=page,
        limit=limit,
        search=search,
        category=category,
        tag=tag,
        status=status,
        sort_by=sort_by,
        sort_order=sort_order,
    )


PostListQueryDep = Annotated[PostListQuery, Depends(get_post_list_query)]
