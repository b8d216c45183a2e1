"""
Post schemas for the blog content API.

Request bodies (`PostCreate`, `PostUpdate`), the listing parameter object
(`PostListQuery`) and the read models returned inside the response envelope.
JSON keys are camelCase on the wire; request bodies also accept snake_case.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from app.configs.settings import (
    CONTENT_MIN_LENGTH,
    DEFAULT_PAGE_SIZE,
    EXCERPT_MAX_LENGTH,
    FEATURED_IMAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from app.models import PostDB, UserDB
from app.utils.helpers import normalize_labels

PostStatus = Literal["draft", "published", "archived"]
SortOrder = Literal["asc", "desc"]
SortField = Literal[
    "createdAt",
    "updatedAt",
    "publishedAt",
    "title",
    "views",
    "likes",
    "commentsCount",
]

Title = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=TITLE_MIN_LENGTH,
        max_length=TITLE_MAX_LENGTH,
    ),
]
Content = Annotated[str, StringConstraints(min_length=CONTENT_MIN_LENGTH)]
Excerpt = Annotated[str, StringConstraints(max_length=EXCERPT_MAX_LENGTH)]
ImageUrl = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=FEATURED_IMAGE_MAX_LENGTH),
]


class CamelModel(BaseModel):
    """Base for models exchanged as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PostCreate(CamelModel):
    """Post creation payload (author, slug and counters are never client-set)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Hello World Post",
                "content": "A first post long enough to pass the fifty character minimum.",
                "excerpt": "A first post",
                "categories": ["tech"],
                "tags": ["intro"],
                "featuredImage": "https://example.com/cover.jpg",
            },
        },
    )

    title: Title
    content: Content
    excerpt: Excerpt | None = None
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    featured_image: ImageUrl | None = None

    @field_validator("categories", "tags", mode="after")
    @classmethod
    def trim_labels(cls, v: list[str]) -> list[str]:
        return normalize_labels(v)


class PostUpdate(CamelModel):
    """
    Partial post update.

    Only the fields declared here can change; anything else in the body
    (``authorId``, ``slug``, counters, timestamps) is discarded.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {"status": "published", "tags": ["intro", "news"]},
        },
    )

    title: Title | None = None
    content: Content | None = None
    excerpt: Excerpt | None = None
    categories: list[str] | None = None
    tags: list[str] | None = None
    featured_image: ImageUrl | None = None
    status: PostStatus | None = None
    featured: bool | None = None

    @field_validator("categories", "tags", mode="after")
    @classmethod
    def trim_labels(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else normalize_labels(v)


class AuthorProfile(CamelModel):
    first_name: str | None = None
    last_name: str | None = None
    avatar: str | None = None
    bio: str | None = None


class AuthorResponse(CamelModel):
    """Author display data attached to posts at read time."""

    id: UUID
    username: str
    profile: AuthorProfile

    @classmethod
    def from_user(cls, user: UserDB) -> "AuthorResponse":
        return cls(
            id=user.uuid,
            username=user.username,
            profile=AuthorProfile(
                first_name=user.first_name,
                last_name=user.last_name,
                avatar=user.avatar,
                bio=user.bio,
            ),
        )


class PostMeta(CamelModel):
    views: int = 0
    likes: int = 0
    comments_count: int = 0


class PostResponse(CamelModel):
    """Full post representation."""

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    author_id: UUID
    author: AuthorResponse | None = None
    categories: list[str]
    tags: list[str]
    featured_image: str | None = None
    featured: bool = False
    status: PostStatus
    published_at: datetime | None = None
    meta: PostMeta
    created_at: datetime
    updated_at: datetime

    @field_validator("published_at", "created_at", "updated_at", mode="after")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        """Stores without timezone support hand back naive UTC values."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v

    @classmethod
    def from_db(cls, post: PostDB, author: UserDB | None = None) -> "PostResponse":
        """Build the response from a row plus the separately loaded author."""
        return cls(
            id=post.id,
            title=post.title,
            slug=post.slug,
            content=post.content,
            excerpt=post.excerpt,
            author_id=post.author_id,
            author=AuthorResponse.from_user(author) if author else None,
            categories=list(post.categories or []),
            tags=list(post.tags or []),
            featured_image=post.featured_image,
            featured=post.featured,
            status=post.status,
            published_at=post.published_at,
            meta=PostMeta(
                views=post.views,
                likes=post.likes,
                comments_count=post.comments_count,
            ),
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    pagination: Pagination


@dataclass(frozen=True)
class PostListQuery:
    """
    Listing parameters consumed by the query builder.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Page size.
    search : str | None
        Free text matched against title and content.
    category : str | None
        Required member of ``categories``.
    tag : str | None
        Required member of ``tags``.
    status : PostStatus
        Status filter, always applied.
    sort_by : SortField
        Column to sort on.
    sort_order : SortOrder
        Sort direction.
    """

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str | None = None
    category: str | None = None
    tag: str | None = None
    status: PostStatus = "published"
    sort_by: SortField = "createdAt"
    sort_order: SortOrder = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit
