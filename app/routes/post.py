# app/routes/post.py

"""
Post Routes.

CRUD endpoints and filtered listing for posts. Every response is wrapped in
the standard ``{success, message?, data?, error?}`` envelope.

Summary
-------
Endpoints include:
  - Create post (authenticated)
  - List posts (search, category, tag, status, sorting, pagination)
  - Get post by slug (counts a view when published)
  - Update post (author or admin)
  - Delete post (author or admin)

Dependencies
------------
  - `PostServiceDep`: Post service bound to the request session.
  - `IdentityDep`: Caller resolved from the bearer token.
"""

from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Body, Path
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from app.dependencies import IdentityDep, PostListQueryDep, PostServiceDep
from app.schemas import Envelope, PostCreate, PostUpdate, success_response

router = APIRouter(prefix="/api/posts", tags=["📝 Posts"])

logger = getLogger(__name__)

SlugPath = Annotated[str, Path(min_length=1, max_length=200, description="Post slug")]

POST_EXAMPLE = {
    "id": "123e4567-e89b-12d3-a456-426614174000",
    "title": "Hello World Post",
    "slug": "hello-world-post",
    "content": "A first post long enough to pass the fifty character minimum.",
    "excerpt": "A first post",
    "authorId": "123e4567-e89b-12d3-a456-426614174111",
    "author": {
        "id": "123e4567-e89b-12d3-a456-426614174111",
        "username": "jane",
        "profile": {"firstName": "Jane", "lastName": "Doe", "avatar": None, "bio": None},
    },
    "categories": ["tech"],
    "tags": ["intro"],
    "featuredImage": None,
    "featured": False,
    "status": "draft",
    "publishedAt": None,
    "meta": {"views": 0, "likes": 0, "commentsCount": 0},
    "createdAt": "2025-01-01T00:00:00Z",
    "updatedAt": "2025-01-01T00:00:00Z",
}


def _error_example(description: str, message: str, error: str | None = None) -> dict:
    example: dict = {"success": False, "message": message}
    if error:
        example["error"] = error
    return {
        "description": description,
        "content": {"application/json": {"example": example}},
    }


UNAUTHORIZED = _error_example("Missing or invalid bearer token", "Not authenticated")
FORBIDDEN = _error_example(
    "Caller is neither the author nor an admin",
    "Access denied, you can only update your own posts",
)
NOT_FOUND = _error_example("Not found", "Post not found")
CONFLICT = _error_example(
    "Slug already taken",
    "A post with this title already exists",
    "Slug 'hello-world-post' is already taken",
)
BAD_REQUEST = _error_example(
    "Validation failed",
    "Validation failed",
    "title: String should have at least 5 characters",
)


@router.post(
    "",
    response_class=ORJSONResponse,
    response_model=Envelope,
    status_code=HTTP_201_CREATED,
    summary="Create a new post",
    description="Create a draft post authored by the caller. The slug is derived from the title.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Post created successfully",
                        "data": {"post": POST_EXAMPLE},
                    },
                },
            },
        },
        400: BAD_REQUEST,
        401: UNAUTHORIZED,
        409: CONFLICT,
    },
    operation_id="posts_create",
)
async def create_post(
    post: Annotated[
        PostCreate,
        Body(
            openapi_examples={
                "basic": {
                    "summary": "Basic post creation",
                    "value": {
                        "title": "Hello World Post",
                        "content": "A first post long enough to pass the fifty character minimum.",
                        "categories": ["tech"],
                        "tags": ["intro"],
                    },
                },
            },
        ),
    ],
    identity: IdentityDep,
    service: PostServiceDep,
) -> ORJSONResponse:
    """
    Create a new post.

    Parameters
    ----------
    post : PostCreate
        Post input payload.
    identity : Identity
        Authenticated author.
    service : PostService
        Post service dependency.

    Returns
    -------
    ORJSONResponse
        Envelope with the created post.
    """
    created = await service.create(identity, post)
    return success_response(
        {"post": created},
        message="Post created successfully",
        status_code=HTTP_201_CREATED,
    )


@router.get(
    "",
    response_class=ORJSONResponse,
    response_model=Envelope,
    summary="List posts",
    description=(
        "Paginated listing with full-text search, category and tag filters, "
        "status filter (default `published`) and sorting."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "data": {
                            "posts": [POST_EXAMPLE],
                            "pagination": {"current": 1, "pages": 1, "total": 1},
                        },
                    },
                },
            },
        },
        400: _error_example(
            "Invalid query parameters",
            "Validation failed",
            "limit: Input should be less than or equal to 100",
        ),
    },
    operation_id="posts_list",
)
async def list_posts(query: PostListQueryDep, service: PostServiceDep) -> ORJSONResponse:
    """
    List posts.

    Parameters
    ----------
    query : PostListQuery
        Filters, sort and page.
    service : PostService
        Post service dependency.

    Returns
    -------
    ORJSONResponse
        Envelope with ``posts`` and ``pagination``.
    """
    return success_response(await service.list(query))


@router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=Envelope,
    summary="Get post by slug",
    description="Retrieve a post by its slug. Published posts count a view.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"success": True, "data": {"post": POST_EXAMPLE}},
                },
            },
        },
        404: NOT_FOUND,
    },
    operation_id="posts_get_by_slug",
)
async def get_post(slug: SlugPath, service: PostServiceDep) -> ORJSONResponse:
    """
    Get a post by slug.

    Parameters
    ----------
    slug : str
        Post slug.
    service : PostService
        Post service dependency.

    Returns
    -------
    ORJSONResponse
        Envelope with the post.
    """
    return success_response({"post": await service.get(slug)})


@router.put(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=Envelope,
    summary="Update a post",
    description=(
        "Partially update a post. Only title, content, excerpt, categories, tags, "
        "featuredImage, status and featured are applied; other fields are ignored."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Post updated successfully",
                        "data": {"post": POST_EXAMPLE},
                    },
                },
            },
        },
        400: BAD_REQUEST,
        401: UNAUTHORIZED,
        403: FORBIDDEN,
        404: NOT_FOUND,
        409: CONFLICT,
    },
    operation_id="posts_update",
)
async def update_post(
    slug: SlugPath,
    patch: PostUpdate,
    identity: IdentityDep,
    service: PostServiceDep,
) -> ORJSONResponse:
    """
    Update a post.

    Parameters
    ----------
    slug : str
        Current slug of the post.
    patch : PostUpdate
        Fields to change.
    identity : Identity
        Authenticated caller.
    service : PostService
        Post service dependency.

    Returns
    -------
    ORJSONResponse
        Envelope with the updated post.
    """
    updated = await service.update(slug, identity, patch)
    return success_response({"post": updated}, message="Post updated successfully")


@router.delete(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=Envelope,
    summary="Delete a post",
    description="Permanently delete a post. Only its author or an admin may do this.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"success": True, "message": "Post deleted successfully"},
                },
            },
        },
        401: UNAUTHORIZED,
        403: _error_example(
            "Caller is neither the author nor an admin",
            "Access denied, you can only delete your own posts",
        ),
        404: NOT_FOUND,
    },
    operation_id="posts_delete",
)
async def delete_post(
    slug: SlugPath,
    identity: IdentityDep,
    service: PostServiceDep,
) -> ORJSONResponse:
    """
    Delete a post.

    Parameters
    ----------
    slug : str
        Post slug.
    identity : Identity
        Authenticated caller.
    service : PostService
        Post service dependency.

    Returns
    -------
    ORJSONResponse
        Envelope with a confirmation message.
    """
    await service.delete(slug, identity)
    logger.info(f"Post '{slug}' deleted by {identity.id}")
    return success_response(message="Post deleted successfully")
