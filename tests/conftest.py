"""Shared test fixtures and configuration.

Provides in-process fakes for the pipeline seams: a scriptable listing
source, an article factory with ages relative to "now", an in-memory store
and a fake Playwright page for the scraper.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta
from typing import Any, Optional

import pytest

from newsdesk.news.models import Article, NewsCategory
from newsdesk.news.sources.base import NewsSource
from newsdesk.storage.memory import InMemoryArticleStore
from newsdesk.utils.timestamps import now_utc


# =============================================================================
# Articles
# =============================================================================

def build_test_article(
    title: str = "Test story",
    url: Optional[str] = None,
    *,
    source: str = "Fake Wire",
    published_ago: timedelta = timedelta(minutes=30),
    scraped_ago: timedelta = timedelta(0),
    category: Optional[NewsCategory] = None,
    summary: Optional[str] = None,
    content: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Article:
    now = now or now_utc()
    slug = title.lower().replace(" ", "-")
    return Article(
        title=title,
        url=url or f"https://news.example.com/{slug}",
        source=source,
        published_at=now - published_ago,
        summary=summary,
        content=content,
        category=category,
        scraped_at=now - scraped_ago,
    )


@pytest.fixture
def make_article():
    """Factory fixture: ``make_article("Title", published_ago=timedelta(hours=2))``."""
    return build_test_article


# =============================================================================
# Sources
# =============================================================================

class FakeSource(NewsSource):
    """Scriptable listing source.

    Args:
        name: Source name used in logs and ``sources_used``.
        articles: Returned by every headline call.
        search_results: Query -> articles for ``search``.
        error: Raised from every call (the boundary turns it into []).
        delay: Seconds to sleep before answering.
    """

    def __init__(
        self,
        name: str = "fake",
        articles: Optional[list[Article]] = None,
        *,
        search_results: Optional[dict[str, list[Article]]] = None,
        supports_search: bool = False,
        available: bool = True,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        timeout: float = 1.0,
        priority: int = 1,
    ):
        super().__init__(api_key="test-key" if available else None, timeout=timeout, priority=priority)
        self.name = name
        self.supports_search = supports_search
        self.articles = articles or []
        self.search_results = search_results or {}
        self.error = error
        self.delay = delay
        self.calls: list[tuple[Optional[NewsCategory], int, int]] = []
        self.search_calls: list[str] = []

    async def _fetch_headlines(self, category, page, page_size):
        self.calls.append((category, page, page_size))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.articles)

    async def _search(self, query, page, page_size):
        self.search_calls.append(query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return list(self.search_results.get(query, []))


@pytest.fixture
def fake_source():
    """Factory fixture for ``FakeSource``."""
    return FakeSource


# =============================================================================
# Storage
# =============================================================================

@pytest.fixture
def memory_store() -> InMemoryArticleStore:
    return InMemoryArticleStore()


# =============================================================================
# Browser
# =============================================================================

class FakeElement:
    """Stands in for a Playwright ElementHandle."""

    def __init__(self, text: Optional[str] = None, attributes: Optional[dict[str, str]] = None):
        self._text = text
        self._attributes = attributes or {}

    async def text_content(self) -> Optional[str]:
        return self._text

    async def get_attribute(self, name: str) -> Optional[str]:
        return self._attributes.get(name)


class FakePage:
    """Stands in for a Playwright Page.

    Args:
        url: Final page URL (used to resolve relative image paths).
        selectors: CSS selector -> list of FakeElement.
        goto_error: Raised from ``goto`` when set.
        goto_delay: Seconds ``goto`` sleeps before returning.
    """

    def __init__(
        self,
        url: str = "https://news.example.com/story",
        selectors: Optional[dict[str, list[FakeElement]]] = None,
        goto_error: Optional[Exception] = None,
        goto_delay: float = 0.0,
    ):
        self.url = url
        self.selectors = selectors or {}
        self.goto_error = goto_error
        self.goto_delay = goto_delay
        self.visited: list[str] = []

    async def goto(self, url: str, **kwargs: Any) -> None:
        self.visited.append(url)
        if self.goto_delay:
            await asyncio.sleep(self.goto_delay)
        if self.goto_error is not None:
            raise self.goto_error

    async def wait_for_timeout(self, ms: float) -> None:
        return None

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        elements = self.selectors.get(selector) or []
        return elements[0] if elements else None

    async def query_selector_all(self, selector: str) -> list[FakeElement]:
        return list(self.selectors.get(selector) or [])


@pytest.fixture
def fake_page():
    """Factory fixture for ``FakePage`` and ``FakeElement``."""
    return FakePage, FakeElement
