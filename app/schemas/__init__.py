from app.schemas.auth import Identity, TokenData
from app.schemas.envelope import Envelope, success_response
from app.schemas.post import (
    AuthorResponse,
    Pagination,
    PostCreate,
    PostListQuery,
    PostListResponse,
    PostMeta,
    PostResponse,
    PostUpdate,
)

__all__ = [
    "AuthorResponse",
    "Envelope",
    "Identity",
    "Pagination",
    "PostCreate",
    "PostListQuery",
    "PostListResponse",
    "PostMeta",
    "PostResponse",
    "PostUpdate",
    "TokenData",
    "success_response",
]
