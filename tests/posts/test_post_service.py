# tests/posts/test_post_service.py
"""Tests for app/services/post.py."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.schemas import Identity, PostCreate, PostUpdate
from app.services.post import PostService, derive_slug

CONTENT = "A first post long enough to pass the fifty character minimum easily."


def new_post(title: str = "Hello World Post", **kwargs: object) -> PostCreate:
    return PostCreate.model_validate({"title": title, "content": CONTENT, **kwargs})


class TestDeriveSlug:
    """Tests for derive_slug."""

    def test_returns_slug(self) -> None:
        assert derive_slug("Hello World Post") == "hello-world-post"

    def test_rejects_title_without_slug_characters(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            derive_slug("!!! ??? ***")
        assert exc_info.value.status_code == 400
        assert "title" in (exc_info.value.error or "")


class TestCreate:
    """Tests for PostService.create."""

    async def test_creates_draft_with_derived_slug(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        post = await post_service.create(
            author_identity,
            new_post(categories=[" tech ", ""], tags=["intro"]),
        )

        assert post.slug == "hello-world-post"
        assert post.status == "draft"
        assert post.author_id == author_identity.id
        assert post.published_at is None
        assert post.categories == ["tech"]
        assert post.meta.views == 0
        assert post.meta.likes == 0
        assert post.meta.comments_count == 0

    async def test_attaches_author_profile(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        post = await post_service.create(author_identity, new_post())

        assert post.author is not None
        assert post.author.username == "jane"
        assert post.author.profile.first_name == "Jane"

    async def test_same_slug_conflicts(
        self,
        session: AsyncSession,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post("Hello World Post"))
        await session.commit()

        with pytest.raises(ConflictError) as exc_info:
            await post_service.create(author_identity, new_post("hello, world! post"))

        assert exc_info.value.status_code == 409

    async def test_conflict_keeps_first_post(
        self,
        session: AsyncSession,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post("Hello World Post"))
        await session.commit()

        with pytest.raises(ConflictError):
            await post_service.create(author_identity, new_post("Hello World Post"))

        post = await post_service.get("hello-world-post")
        assert post.title == "Hello World Post"


class TestGet:
    """Tests for PostService.get and view accounting."""

    async def test_missing_slug_raises_not_found(self, post_service: PostService) -> None:
        with pytest.raises(NotFoundError):
            await post_service.get("does-not-exist")

    async def test_draft_views_never_change(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        for _ in range(3):
            post = await post_service.get("hello-world-post")

        assert post.meta.views == 0

    async def test_published_views_count_each_fetch(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())
        await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(status="published"),
        )

        views = [(await post_service.get("hello-world-post")).meta.views for _ in range(4)]

        assert views == [1, 2, 3, 4]

    async def test_archived_views_never_change(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())
        await post_service.update("hello-world-post", author_identity, PostUpdate(status="published"))
        await post_service.get("hello-world-post")
        await post_service.update("hello-world-post", author_identity, PostUpdate(status="archived"))

        post = await post_service.get("hello-world-post")
        post = await post_service.get("hello-world-post")

        assert post.meta.views == 1


class TestUpdate:
    """Tests for PostService.update."""

    async def test_non_author_is_forbidden(
        self,
        post_service: PostService,
        author_identity: Identity,
        other_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        with pytest.raises(ForbiddenError) as exc_info:
            await post_service.update(
                "hello-world-post",
                other_identity,
                PostUpdate(excerpt="Hijacked"),
            )

        assert exc_info.value.status_code == 403

    async def test_author_can_update(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        post = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(excerpt="Short summary", featured=True),
        )

        assert post.excerpt == "Short summary"
        assert post.featured is True

    async def test_admin_can_update_any_post(
        self,
        post_service: PostService,
        author_identity: Identity,
        admin_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        post = await post_service.update(
            "hello-world-post",
            admin_identity,
            PostUpdate(tags=["moderated"]),
        )

        assert post.tags == ["moderated"]
        assert post.author_id == author_identity.id

    async def test_missing_slug_raises_not_found(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        with pytest.raises(NotFoundError):
            await post_service.update("nope", author_identity, PostUpdate(excerpt="x"))

    async def test_first_publish_sets_published_at(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        post = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(status="published"),
        )

        assert post.status == "published"
        assert post.published_at is not None

    async def test_republishing_keeps_published_at(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())
        first = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(status="published"),
        )

        again = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(status="published"),
        )
        await post_service.update("hello-world-post", author_identity, PostUpdate(status="archived"))
        revived = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(status="published"),
        )

        assert again.published_at == first.published_at
        assert revived.published_at == first.published_at

    async def test_title_change_rederives_slug(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        post = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate(title="Goodbye World Post"),
        )

        assert post.slug == "goodbye-world-post"
        with pytest.raises(NotFoundError):
            await post_service.get("hello-world-post")

    async def test_title_change_onto_taken_slug_conflicts(
        self,
        session: AsyncSession,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post("Hello World Post"))
        await post_service.create(author_identity, new_post("Another Post Title"))
        await session.commit()

        with pytest.raises(ConflictError):
            await post_service.update(
                "another-post-title",
                author_identity,
                PostUpdate(title="Hello World Post"),
            )

    async def test_ignores_fields_outside_whitelist(
        self,
        post_service: PostService,
        author_identity: Identity,
        other_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())
        patch = PostUpdate.model_validate(
            {
                "authorId": str(other_identity.id),
                "slug": "sneaky",
                "views": 1000,
                "publishedAt": "2020-01-01T00:00:00Z",
                "excerpt": "Legit change",
            },
        )

        post = await post_service.update("hello-world-post", author_identity, patch)

        assert post.author_id == author_identity.id
        assert post.slug == "hello-world-post"
        assert post.meta.views == 0
        assert post.published_at is None
        assert post.excerpt == "Legit change"

    async def test_null_for_required_field_is_rejected(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        with pytest.raises(ValidationError) as exc_info:
            await post_service.update(
                "hello-world-post",
                author_identity,
                PostUpdate.model_validate({"title": None}),
            )

        assert exc_info.value.error == "title: cannot be null"

    async def test_null_clears_optional_field(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post(excerpt="To be removed"))

        post = await post_service.update(
            "hello-world-post",
            author_identity,
            PostUpdate.model_validate({"excerpt": None}),
        )

        assert post.excerpt is None


class TestDelete:
    """Tests for PostService.delete."""

    async def test_author_deletes(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        await post_service.delete("hello-world-post", author_identity)

        with pytest.raises(NotFoundError):
            await post_service.get("hello-world-post")

    async def test_admin_deletes_any_post(
        self,
        post_service: PostService,
        author_identity: Identity,
        admin_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        await post_service.delete("hello-world-post", admin_identity)

        with pytest.raises(NotFoundError):
            await post_service.get("hello-world-post")

    async def test_non_author_is_forbidden(
        self,
        post_service: PostService,
        author_identity: Identity,
        other_identity: Identity,
    ) -> None:
        await post_service.create(author_identity, new_post())

        with pytest.raises(ForbiddenError):
            await post_service.delete("hello-world-post", other_identity)

        assert (await post_service.get("hello-world-post")).slug == "hello-world-post"

    async def test_missing_slug_raises_not_found(
        self,
        post_service: PostService,
        author_identity: Identity,
    ) -> None:
        with pytest.raises(NotFoundError):
            await post_service.delete("nope", author_identity)
