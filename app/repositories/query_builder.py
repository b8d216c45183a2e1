"""Translate listing parameters into SQL for the posts table."""

from sqlalchemy import (
    ColumnElement,
    Select,
    and_,
    cast,
    exists,
    func,
    literal_column,
    or_,
    select,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import InstrumentedAttribute

from app.models.post import PostDB
from app.schemas.post import PostListQuery

SORT_COLUMNS: dict[str, InstrumentedAttribute] = {
    "createdAt": PostDB.created_at,
    "updatedAt": PostDB.updated_at,
    "publishedAt": PostDB.published_at,
    "title": PostDB.title,
    "views": PostDB.views,
    "likes": PostDB.likes,
    "commentsCount": PostDB.comments_count,
}

# Inlined so the planner can match the GIN expression index on PostgreSQL
TS_CONFIG = literal_column("'english'")


def search_document() -> ColumnElement:
    """``to_tsvector('english', title || ' ' || content)``"""
    return func.to_tsvector(TS_CONFIG, PostDB.title + literal_column("' '") + PostDB.content)


class PostQueryBuilder:
    """
    Build the filtered, sorted, paginated SELECT and its COUNT twin.

    Filters are ANDed: status always, then search, category and tag when
    given. Full-text search and label membership use native operators on
    PostgreSQL and portable equivalents elsewhere.
    """

    def __init__(self, query: PostListQuery, dialect: str = "postgresql") -> None:
        self.query = query
        self.dialect = dialect

    @property
    def is_postgres(self) -> bool:
        return self.dialect == "postgresql"

    def filters(self) -> list[ColumnElement[bool]]:
        query = self.query
        # pyrefly: ignore [bad-argument-type]
        conditions: list[ColumnElement[bool]] = [PostDB.status == query.status]

        if query.search and query.search.strip():
            conditions.append(self._matches_text(query.search.strip()))
        if query.category:
            conditions.append(self._has_label(PostDB.categories, query.category))
        if query.tag:
            conditions.append(self._has_label(PostDB.tags, query.tag))

        return conditions

    def order_by(self) -> list[ColumnElement]:
        column = SORT_COLUMNS[self.query.sort_by]
        direction = column.asc() if self.query.sort_order == "asc" else column.desc()
        # id keeps page boundaries stable when the sort key ties
        return [direction, PostDB.id.asc()]

    def statement(self) -> Select:
        return (
            select(PostDB)
            .where(*self.filters())
            .order_by(*self.order_by())
            .offset(self.query.offset)
            .limit(self.query.limit)
        )

    def count_statement(self) -> Select:
        return select(func.count()).select_from(PostDB).where(*self.filters())

    def _matches_text(self, term: str) -> ColumnElement[bool]:
        if self.is_postgres:
            return search_document().bool_op("@@")(func.plainto_tsquery(TS_CONFIG, term))

        # Every word must appear in the title or the content
        return and_(
            *(
                or_(
                    PostDB.title.icontains(word, autoescape=True),
                    PostDB.content.icontains(word, autoescape=True),
                )
                for word in term.split()
            ),
        )

    def _has_label(self, column: InstrumentedAttribute, label: str) -> ColumnElement[bool]:
        label = label.strip()
        if self.is_postgres:
            return cast(column, JSONB).contains([label])

        elements = func.json_each(column).table_valued("value")
        return exists(select(elements.c.value).where(elements.c.value == label))
