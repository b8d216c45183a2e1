"""Post service: lifecycle rules for posts on top of the repositories."""

from collections.abc import Sequence
from math import ceil

from app.auth.permissions import check_owner_or_admin
from app.errors.database import NotFoundError
from app.errors.validation import ValidationError
from app.models.post import PostDB
from app.monitoring import get_logger
from app.repositories.post import PostRepository
from app.repositories.user import UserRepository
from app.schemas.auth import Identity
from app.schemas.post import (
    Pagination,
    PostCreate,
    PostListQuery,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from app.utils.helpers import slugify, utc_now

logger = get_logger(__name__)

# Only these fields may be changed through an update
MUTABLE_FIELDS = frozenset(
    {
        "title",
        "content",
        "excerpt",
        "categories",
        "tags",
        "featured_image",
        "status",
        "featured",
    },
)
NON_NULLABLE_FIELDS = frozenset({"title", "content", "categories", "tags", "status", "featured"})


def derive_slug(title: str) -> str:
    """
    Slug for `title`, rejecting titles with no URL-safe characters.

    Raises:
        ValidationError: If the slug would be empty
    """
    slug = slugify(title)
    if not slug:
        raise ValidationError(error="title: must contain at least one letter or digit")
    return slug


class PostService:
    """
    Entity manager for posts.

    Owns slug derivation, authorization of mutations, first-publish
    timestamping and view accounting. Author display data is loaded from
    the user repository at read time.
    """

    def __init__(self, posts: PostRepository, users: UserRepository) -> None:
        """
        Initialize the post service.

        Args:
            posts: Post repository bound to the request session
            users: User repository bound to the same session
        """
        self.posts = posts
        self.users = users

    async def _get_or_404(self, slug: str) -> PostDB:
        post = await self.posts.get_by_slug(slug)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def _to_response(self, post: PostDB) -> PostResponse:
        author = await self.users.get_by_id(post.author_id)
        return PostResponse.from_db(post, author)

    async def create(self, identity: Identity, data: PostCreate) -> PostResponse:
        """
        Create a draft post owned by `identity`.

        Raises:
            ValidationError: If the title yields an empty slug
            ConflictError: If the slug is already taken
        """
        post = PostDB(
            author_id=identity.id,
            title=data.title,
            slug=derive_slug(data.title),
            content=data.content,
            excerpt=data.excerpt,
            categories=data.categories,
            tags=data.tags,
            featured_image=data.featured_image,
            status="draft",
        )
        post = await self.posts.create(post)
        logger.info("Post created", slug=post.slug, author_id=str(identity.id))
        return await self._to_response(post)

    async def get(self, slug: str) -> PostResponse:
        """
        Fetch a post by slug, counting a view when it is published.

        Raises:
            NotFoundError: If no post has this slug
        """
        post = await self._get_or_404(slug)
        if post.status == "published":
            post = await self.posts.increment_views(post)
        return await self._to_response(post)

    async def update(self, slug: str, identity: Identity, patch: PostUpdate) -> PostResponse:
        """
        Apply a partial update to a post.

        Only whitelisted fields present in `patch` are applied. A title
        change re-derives the slug. The first move into ``published`` stamps
        ``published_at``; later republishing keeps the original stamp.

        Raises:
            NotFoundError: If no post has this slug
            ForbiddenError: If `identity` is neither the author nor an admin
            ValidationError: If a required field is set to null
            ConflictError: If the new title collides with another post's slug
        """
        post = await self._get_or_404(slug)
        check_owner_or_admin(identity, post, "update")

        changes = patch.model_dump(include=set(MUTABLE_FIELDS), exclude_unset=True)
        nulled = sorted(
            field for field in NON_NULLABLE_FIELDS & changes.keys() if changes[field] is None
        )
        if nulled:
            raise ValidationError(error="; ".join(f"{field}: cannot be null" for field in nulled))

        was_published = post.status == "published"
        if "title" in changes:
            post.slug = derive_slug(changes["title"])
        for field, value in changes.items():
            setattr(post, field, value)

        if post.status == "published" and not was_published and post.published_at is None:
            post.published_at = utc_now()

        post = await self.posts.save(post)
        logger.info("Post updated", slug=post.slug, fields=sorted(changes), by=str(identity.id))
        return await self._to_response(post)

    async def delete(self, slug: str, identity: Identity) -> None:
        """
        Permanently remove a post.

        Raises:
            NotFoundError: If no post has this slug
            ForbiddenError: If `identity` is neither the author nor an admin
        """
        post = await self._get_or_404(slug)
        check_owner_or_admin(identity, post, "delete")
        await self.posts.delete(post)

    async def _with_authors(self, posts: Sequence[PostDB]) -> list[PostResponse]:
        authors = await self.users.get_many(post.author_id for post in posts)
        return [PostResponse.from_db(post, authors.get(post.author_id)) for post in posts]

    async def list(self, query: PostListQuery) -> PostListResponse:
        """
        One page of posts matching `query`, with pagination totals.

        ``pages`` is ``ceil(total / limit)``, so an empty result reports
        zero pages.
        """
        posts, total = await self.posts.get_all(query)
        return PostListResponse(
            posts=await self._with_authors(posts),
            pagination=Pagination(
                current=query.page,
                pages=ceil(total / query.limit) if total else 0,
                total=total,
            ),
        )
