"""Post database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

from app.configs.settings import (
    EXCERPT_MAX_LENGTH,
    FEATURED_IMAGE_MAX_LENGTH,
    TITLE_MAX_LENGTH,
)
from app.utils.helpers import utc_now

POST_STATUSES = ("draft", "published", "archived")

# JSONB on PostgreSQL (GIN-indexable containment), plain JSON elsewhere
LabelList = JSON().with_variant(JSONB(), "postgresql")


class PostDB(SQLModel, table=True):
    """
    Post database model.

    The slug column carries the unique index that arbitrates concurrent
    creates and title changes; counters are only ever changed with
    in-database arithmetic.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_status_created", "status", "created_at"),
        Index("ix_posts_author_created", "author_id", "created_at"),
        Index("ix_posts_tags_gin", "tags", postgresql_using="gin"),
        Index("ix_posts_categories_gin", "categories", postgresql_using="gin"),
        CheckConstraint(
            f"status IN ({', '.join(repr(status) for status in POST_STATUSES)})",
            name="ck_posts_status",
        ),
        CheckConstraint(
            "views >= 0 AND likes >= 0 AND comments_count >= 0",
            name="ck_posts_counters_non_negative",
        ),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )

    # Foreign key to User
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.uuid)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(TITLE_MAX_LENGTH), nullable=False),
        description="Post title",
    )
    slug: str = Field(
        sa_column=Column(String(TITLE_MAX_LENGTH), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post body",
    )

    # Optional fields
    excerpt: str | None = Field(
        default=None,
        sa_column=Column(String(EXCERPT_MAX_LENGTH)),
        description="Short excerpt",
    )
    featured_image: str | None = Field(
        default=None,
        sa_column=Column(String(FEATURED_IMAGE_MAX_LENGTH)),
        description="Featured image URL",
    )
    featured: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default="false"),
        description="Editorial featured flag",
    )

    # Labels
    categories: list[str] = Field(
        default_factory=list,
        sa_column=Column(LabelList, nullable=False),
        description="Category labels",
    )
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(LabelList, nullable=False),
        description="Tag labels",
    )

    # Workflow
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, server_default="draft", index=True),
        description="Post status (draft, published, archived)",
    )
    published_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="First publication timestamp",
    )

    # Counters
    views: int = Field(default=0, nullable=False, description="View count")
    likes: int = Field(default=0, nullable=False, description="Like count")
    comments_count: int = Field(default=0, nullable=False, description="Comment count")

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )
