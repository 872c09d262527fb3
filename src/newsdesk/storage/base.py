"""Article store interface.

Stores are keyed by ``Article.url``. ``upsert`` on a known url updates the
mutable fields of the existing row and keeps its identity. Store methods are
synchronous; async callers run them through ``asyncio.to_thread``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, Optional

from newsdesk.news.models import Article, NewsCategory
from newsdesk.utils.timestamps import to_utc

ORDER_FIELDS = ("published_at", "scraped_at", "title")
DEFAULT_ORDER = "-published_at"


@dataclass(frozen=True)
class ArticleFilter:
    """Query filter over stored articles.

    ``category``, ``published_after``, ``scraped_after`` and ``search`` are
    AND-ed. The two age bounds (``published_before``, ``scraped_before``) are
    OR-ed with each other when both are set, which is what the retention
    purge needs: a row is expired when it is too old by either clock.
    """

    category: Optional[NewsCategory] = None
    published_after: Optional[datetime] = None
    scraped_after: Optional[datetime] = None
    search: Optional[str] = None
    published_before: Optional[datetime] = None
    scraped_before: Optional[datetime] = None

    def matches(self, article: Article) -> bool:
        if self.category is not None and article.category != self.category:
            return False
        if self.published_after is not None and article.published_at < to_utc(self.published_after):
            return False
        if self.scraped_after is not None and article.scraped_at < to_utc(self.scraped_after):
            return False
        if self.search:
            needle = self.search.lower()
            haystack = " ".join(
                part for part in (article.title, article.summary, article.content) if part
            ).lower()
            if needle not in haystack:
                return False

        age_bounds = []
        if self.published_before is not None:
            age_bounds.append(article.published_at < to_utc(self.published_before))
        if self.scraped_before is not None:
            age_bounds.append(article.scraped_at < to_utc(self.scraped_before))
        if age_bounds and not any(age_bounds):
            return False
        return True

    def with_category(self, category: Optional[NewsCategory]) -> "ArticleFilter":
        return replace(self, category=category)


def sort_articles(articles: Iterable[Article], order_by: str = DEFAULT_ORDER) -> list[Article]:
    """Sort by ``order_by`` (field name, ``-`` prefix for descending).

    The sort is stable, so equal keys keep insertion order.
    """
    descending = order_by.startswith("-")
    field_name = order_by.lstrip("-")
    if field_name not in ORDER_FIELDS:
        raise ValueError(f"Unsupported order_by field: {field_name}")
    return sorted(articles, key=lambda a: getattr(a, field_name), reverse=descending)


def merge_article(existing: Article, incoming: Article) -> Article:
    """Apply an upsert: mutable fields come from ``incoming``, identity stays."""
    return replace(
        existing,
        title=incoming.title,
        summary=incoming.summary if incoming.summary is not None else existing.summary,
        content=incoming.content if incoming.content is not None else existing.content,
        image_url=incoming.image_url if incoming.image_url is not None else existing.image_url,
        category=incoming.category or existing.category or NewsCategory.GENERAL,
        scraped_at=incoming.scraped_at,
    )


class ArticleStore(ABC):
    """Persistence collaborator for the ingestion pipeline."""

    @abstractmethod
    def upsert(self, article: Article) -> bool:
        """Insert or update by url. Returns True when a new row was created."""

    def upsert_many(self, articles: Iterable[Article]) -> int:
        """Upsert each article. Returns the number of new rows."""
        return sum(1 for article in articles if self.upsert(article))

    @abstractmethod
    def find_many(
        self,
        filter: Optional[ArticleFilter] = None,
        skip: int = 0,
        take: Optional[int] = None,
        order_by: str = DEFAULT_ORDER,
    ) -> list[Article]:
        """Query rows matching ``filter``, ordered and paged."""

    @abstractmethod
    def count(self, filter: Optional[ArticleFilter] = None) -> int:
        """Number of rows matching ``filter``."""

    @abstractmethod
    def delete_many(self, filter: Optional[ArticleFilter] = None) -> int:
        """Delete unpinned rows matching ``filter``. Returns the number removed."""

    @abstractmethod
    def get(self, url: str) -> Optional[Article]:
        """Row for ``url``, if stored."""

    @abstractmethod
    def pin(self, url: str) -> None:
        """Protect ``url`` from ``delete_many`` (a saved article)."""

    @abstractmethod
    def unpin(self, url: str) -> None:
        """Remove the protection added by ``pin``."""

    @abstractmethod
    def is_pinned(self, url: str) -> bool:
        """Whether ``url`` is protected from purges."""
