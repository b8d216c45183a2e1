# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    IdentityDep,
    PostListQueryDep,
    PostRepoDep,
    PostServiceDep,
    SettingsDep,
    UserRepoDep,
    get_current_identity,
    get_post_list_query,
    get_post_service,
)

__all__ = [
    "IdentityDep",
    "PostListQueryDep",
    "PostRepoDep",
    "PostServiceDep",
    "SettingsDep",
    "UserRepoDep",
    "get_current_identity",
    "get_post_list_query",
    "get_post_service",
]
