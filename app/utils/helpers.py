from collections.abc import Iterable, MutableMapping
from datetime import UTC, datetime
from re import sub
from typing import Any

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute
from starlette.routing import BaseRoute, Match, Route


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return today's date as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def utc_now() -> datetime:
    """Timezone-aware current time used for stored timestamps."""
    return datetime.now(tz=UTC)


def get_summary(request: Request) -> str | None:
    """Extract route summary from request."""

    scope: MutableMapping[str, Any] = request.scope
    app: FastAPI = scope["app"]
    routes: list[BaseRoute] = app.routes

    summary = None
    for route in routes:
        is_api_route = type(route) is APIRoute
        is_route = type(route) is Route
        if is_api_route and route.matches(scope)[0] == Match.FULL:
            summary = route.summary
            break
        if is_route and route.matches(scope)[0] == Match.FULL:
            summary = route.name
            break

    return summary


def slugify(title: str) -> str:
    """
    Derive a URL-safe slug from a post title.

    Lowercases, drops everything outside ``[a-z0-9 -]``, turns runs of
    spaces into one hyphen, collapses repeated hyphens and trims hyphens
    from both ends. Edge hyphens are trimmed even when the title itself
    starts or ends with one, so a slug never begins or ends with ``-``.
    Returns an empty string when nothing survives.

    Examples:
    --------
    >>> slugify("Hello World Post")
    'hello-world-post'
    >>> slugify("Rust & Go: a -- comparison!")
    'rust-go-a-comparison'
    >>> slugify("--Already-slugged--")
    'already-slugged'
    """
    slug = title.lower()
    slug = sub(r"[^a-z0-9 -]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")


def normalize_labels(labels: Iterable[str] | None) -> list[str]:
    """Trim category/tag labels, dropping blanks and keeping order."""
    if not labels:
        return []
    return [label.strip() for label in labels if label and label.strip()]
