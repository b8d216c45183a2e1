"""Post repository for database operations."""

from collections.abc import Sequence
from logging import getLogger

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors.database import ConflictError, InfrastructureError
from app.models.post import PostDB
from app.repositories.query_builder import PostQueryBuilder
from app.schemas.post import PostListQuery
from app.utils.helpers import utc_now

logger = getLogger(__name__)


class PostRepository:
    """
    Repository for Post database operations.

    Writes are flushed, not committed: the request-scoped session owns the
    transaction. Slug uniqueness is enforced by the unique index, so a
    concurrent duplicate surfaces here as a `ConflictError`.
    """

    def __init__(self, session: AsyncSession, dialect: str = "postgresql") -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session
            dialect: SQL dialect name, used to pick search/label operators
        """
        self.session = session
        self.dialect = dialect

    async def _flush(self, post: PostDB) -> PostDB:
        slug = post.slug
        try:
            await self.session.flush()
            await self.session.refresh(post)
            return post
        except IntegrityError as e:
            await self.session.rollback()
            error_msg = str(e.orig) if e.orig else str(e)
            if "slug" in error_msg.lower():
                raise ConflictError(
                    detail="A post with this title already exists",
                    error=f"Slug '{slug}' is already taken",
                ) from e
            raise InfrastructureError(error=f"Database integrity error: {error_msg}") from e

    async def create(self, post: PostDB) -> PostDB:
        """
        Insert a new post.

        Raises:
            ConflictError: If the slug already exists
            InfrastructureError: For other integrity errors
        """
        self.session.add(post)
        return await self._flush(post)

    async def get_by_slug(self, slug: str) -> PostDB | None:
        """
        Get post by slug.

        Args:
            slug: Post slug

        Returns:
            PostDB | None: Post if found, None otherwise
        """
        result = await self.session.execute(
            # pyrefly: ignore [bad-argument-type]
            select(PostDB).where(PostDB.slug == slug),
        )
        return result.scalar_one_or_none()

    async def save(self, post: PostDB) -> PostDB:
        """
        Flush pending changes on `post` and bump ``updated_at``.

        Raises:
            ConflictError: If a changed title collides with another slug
        """
        post.updated_at = utc_now()
        self.session.add(post)
        return await self._flush(post)

    async def delete(self, post: PostDB) -> None:
        await self.session.delete(post)
        await self.session.flush()
        logger.info(f"Post {post.id} deleted")

    async def increment_views(self, post: PostDB) -> PostDB:
        """
        Add one to ``views`` of a published post.

        The increment runs as a single UPDATE so concurrent readers never
        lose a count. Drafts and archived posts are left untouched.
        """
        await self.session.execute(
            update(PostDB)
            # pyrefly: ignore [bad-argument-type]
            .where(PostDB.id == post.id, PostDB.status == "published")
            .values(views=PostDB.views + 1)
            .execution_options(synchronize_session=False),
        )
        await self.session.refresh(post)
        return post

    async def get_all(self, query: PostListQuery) -> tuple[Sequence[PostDB], int]:
        """
        Run a listing query.

        Args:
            query: Filters, sort and page

        Returns:
            tuple: (posts on the requested page, total matches across pages)
        """
        builder = PostQueryBuilder(query, self.dialect)
        total = (await self.session.execute(builder.count_statement())).scalar_one()
        result = await self.session.execute(builder.statement())
        return result.scalars().all(), int(total)
