"""Pure validation functions for news command arguments."""

from __future__ import annotations

from typing import Optional

from newsdesk.constants import PAGE_SIZE_MAX
from newsdesk.news.models import NewsCategory
from newsdesk.news.normalize import is_absolute_url

from ..core.types import Failure, Result, Success

VALID_CATEGORIES: list[str] = ["all"] + [c.value for c in NewsCategory]


def validate_category(category: Optional[str]) -> Result[Optional[NewsCategory]]:
    """Resolve a ``--category`` value. Missing or "all" means every category."""
    if category is None or category.strip().lower() in ("", "all"):
        return Success(None)
    parsed = NewsCategory.parse(category)
    if parsed is None:
        return Failure(
            f"Unknown category: {category}",
            {"valid_categories": ", ".join(VALID_CATEGORIES)},
        )
    return Success(parsed)


def validate_paging(page: int, page_size: int) -> Result[tuple[int, int]]:
    if page < 1:
        return Failure(f"Invalid page: {page}", {"hint": "Pages start at 1"})
    if page_size < 1 or page_size > PAGE_SIZE_MAX:
        return Failure(
            f"Invalid page size: {page_size}",
            {"hint": f"Page size must be between 1 and {PAGE_SIZE_MAX}"},
        )
    return Success((page, page_size))


def validate_url(url: str) -> Result[str]:
    if not is_absolute_url(url):
        return Failure(f"Invalid URL: {url}", {"hint": "Use an absolute http(s) URL"})
    return Success(url.strip())
