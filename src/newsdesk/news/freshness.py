"""Cache freshness and retention policy.

Three windows drive the cache:

- fresh window (default 1 hour): rows scraped within it are served without
  any network call.
- retention window (default 2 days, by ``published_at``): the recency filter
  for listings and search, and the purge bound for old stories.
- scrape staleness (default 24 hours, by ``scraped_at``): rows not re-seen
  by any source for this long are purged so they get refetched.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Sequence

from newsdesk.constants import (
    WINDOW_FRESH_MINUTES,
    WINDOW_RETENTION_DAYS,
    WINDOW_SCRAPE_STALENESS_HOURS,
)
from newsdesk.news.models import Article, NewsCategory
from newsdesk.storage.base import ArticleFilter, ArticleStore
from newsdesk.utils.timestamps import now_utc


class CacheState(str, Enum):
    """Outcome of a cache lookup for one (category, page) query."""

    FRESH_HIT = "fresh_hit"
    STALE = "stale"
    FORCE_REFRESH = "force_refresh"


class FreshnessPolicy:
    """Decides cache-hit vs refetch and which rows to purge."""

    def __init__(
        self,
        fresh_window: timedelta = timedelta(minutes=WINDOW_FRESH_MINUTES),
        retention: timedelta = timedelta(days=WINDOW_RETENTION_DAYS),
        scrape_staleness: timedelta = timedelta(hours=WINDOW_SCRAPE_STALENESS_HOURS),
    ):
        self.fresh_window = fresh_window
        self.retention = retention
        self.scrape_staleness = scrape_staleness

    @classmethod
    def from_settings(cls, settings) -> "FreshnessPolicy":
        return cls(
            fresh_window=timedelta(minutes=settings.fresh_window_minutes),
            retention=timedelta(days=settings.retention_days),
            scrape_staleness=timedelta(hours=settings.scrape_staleness_hours),
        )

    # =========================================================================
    # Cutoffs
    # =========================================================================

    def recency_cutoff(self, now: Optional[datetime] = None) -> datetime:
        """Oldest ``published_at`` still listed or searchable."""
        return (now or now_utc()) - self.retention

    def fresh_cutoff(self, now: Optional[datetime] = None) -> datetime:
        """Oldest ``scraped_at`` still counted as a fresh cache hit."""
        return (now or now_utc()) - self.fresh_window

    def staleness_cutoff(self, now: Optional[datetime] = None) -> datetime:
        return (now or now_utc()) - self.scrape_staleness

    # =========================================================================
    # Filters
    # =========================================================================

    def cache_filter(
        self,
        category: Optional[NewsCategory] = None,
        now: Optional[datetime] = None,
    ) -> ArticleFilter:
        """Rows a listing for ``category`` may be served from."""
        return ArticleFilter(category=category, published_after=self.recency_cutoff(now))

    def purge_filter(self, now: Optional[datetime] = None) -> ArticleFilter:
        """Rows published before the retention window OR scraped before the staleness window."""
        return ArticleFilter(
            published_before=self.recency_cutoff(now),
            scraped_before=self.staleness_cutoff(now),
        )

    # =========================================================================
    # Decisions
    # =========================================================================

    def is_recent(self, article: Article, now: Optional[datetime] = None) -> bool:
        return article.published_at >= self.recency_cutoff(now)

    def is_fresh(self, article: Article, now: Optional[datetime] = None) -> bool:
        return article.scraped_at >= self.fresh_cutoff(now)

    def is_expired(self, article: Article, now: Optional[datetime] = None) -> bool:
        """True when the purge filter would remove ``article`` (ignoring pins)."""
        return self.purge_filter(now).matches(article)

    def evaluate(
        self,
        cached: Sequence[Article],
        force: bool = False,
        now: Optional[datetime] = None,
    ) -> CacheState:
        """Classify the cached rows of one (category, page) query.

        FRESH_HIT needs at least one of ``cached`` scraped within the fresh
        window. ``cached`` is expected to already satisfy ``cache_filter``.
        """
        if force:
            return CacheState.FORCE_REFRESH
        if any(self.is_fresh(article, now) for article in cached):
            return CacheState.FRESH_HIT
        return CacheState.STALE

    def purge(self, store: ArticleStore, now: Optional[datetime] = None) -> int:
        """Delete expired, unpinned rows. Returns the number removed."""
        return store.delete_many(self.purge_filter(now))
