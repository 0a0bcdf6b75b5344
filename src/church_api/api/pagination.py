"""
church_api.api.pagination

Page/limit query handling shared by every list endpoint.

Responsibilities:
- Parse `page` and `limit` query parameters (limit clamped to the configured max).
- Render a repository `Page` into the wire envelope
  `{page, limit, total, totalPages, <items_key>: [...]}`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from fastapi import Depends, Query

from church_api.api.deps import settings_dep
from church_api.db.repositories.paging import Page
from church_api.settings import Settings

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PageParams:
    page: int
    limit: int


def page_params(
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    settings: Settings = Depends(settings_dep),
) -> PageParams:
    if limit is None:
        limit = settings.default_page_limit
    return PageParams(page=page, limit=min(limit, settings.max_page_limit))


def page_envelope(
    page: Page[T], items_key: str, render: Callable[[T], Any]
) -> dict[str, Any]:
    return {
        "page": page.page,
        "limit": page.limit,
        "total": page.total,
        "totalPages": page.total_pages,
        items_key: [render(item) for item in page.items],
    }
