"""News aggregator that walks the source fallback chain over a local cache.

Usage:
    aggregator = NewsAggregator(sources, store, writeback=WriteBackQueue(store))

    # Category listing (served from cache when it is fresh)
    page = await aggregator.get_headlines(NewsCategory.SPORTS, page=1, page_size=20)

    # Free-text search, last two days only
    page = await aggregator.search("election results")

    # Purge expired rows and refetch
    page = await aggregator.refresh(force=True)
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime
from typing import Iterable, Optional, Sequence

from newsdesk.constants import (
    BREAKING_LIMIT_MAX,
    DEDUP_TITLE_PREFIX_LENGTH,
    PAGE_SIZE_DEFAULT,
    PAGE_SIZE_MAX,
)
from newsdesk.news.categorizer import Categorizer
from newsdesk.news.errors import InvalidRequestError
from newsdesk.news.freshness import CacheState, FreshnessPolicy
from newsdesk.news.models import Article, NewsCategory, PagedArticles, Pagination
from newsdesk.news.sources.base import NewsSource
from newsdesk.news.sources.models import BreakingConfig, InternationalConfig
from newsdesk.news.sources.newsapi import NewsAPISource
from newsdesk.news.writeback import WriteBackQueue
from newsdesk.storage.base import ArticleStore
from newsdesk.utils.timestamps import now_utc

logger = logging.getLogger("news")


def _title_key(article: Article) -> str:
    return article.title.lower()[:DEDUP_TITLE_PREFIX_LENGTH]


def deduplicate_articles(articles: Iterable[Article]) -> list[Article]:
    """Drop repeats, keeping the first occurrence.

    Two articles are the same story when their urls are equal or the
    lowercase first 50 characters of their titles are equal. The url check
    runs first. Input order is the priority order, so the surviving copy is
    the one from the highest-priority source.
    """
    seen_urls: set[str] = set()
    seen_titles: set[str] = set()
    unique: list[Article] = []

    for article in articles:
        if article.url in seen_urls:
            continue
        title_key = _title_key(article)
        if title_key in seen_titles:
            continue
        seen_urls.add(article.url)
        seen_titles.add(title_key)
        unique.append(article)

    return unique


def sort_by_recency(articles: Iterable[Article]) -> list[Article]:
    """Newest first; equal timestamps keep their input (priority) order."""
    return sorted(articles, key=lambda a: a.published_at, reverse=True)


def validate_paging(page: int, page_size: int) -> None:
    """Raise InvalidRequestError for a page below 1 or an out-of-range size."""
    if not isinstance(page, int) or page < 1:
        raise InvalidRequestError(f"page must be >= 1, got {page!r}")
    if not isinstance(page_size, int) or not 1 <= page_size <= PAGE_SIZE_MAX:
        raise InvalidRequestError(f"page_size must be between 1 and {PAGE_SIZE_MAX}, got {page_size!r}")


class NewsAggregator:
    """Orchestrates sources, cache, categorizer and write-back.

    Args:
        sources: Listing sources in fallback priority order.
        store: Article cache.
        categorizer: Classifier for uncategorized articles.
        policy: Freshness and retention windows.
        writeback: Detached persistence queue (one is created if None).
        breaking: Breaking-news boost settings.
        international: Countries used by ``top_stories``.
    """

    def __init__(
        self,
        sources: Sequence[NewsSource],
        store: ArticleStore,
        categorizer: Optional[Categorizer] = None,
        policy: Optional[FreshnessPolicy] = None,
        writeback: Optional[WriteBackQueue] = None,
        breaking: Optional[BreakingConfig] = None,
        international: Optional[InternationalConfig] = None,
    ):
        self.sources = sorted(sources, key=lambda s: s.priority)
        self.store = store
        self.categorizer = categorizer or Categorizer()
        self.policy = policy or FreshnessPolicy()
        self.writeback = writeback or WriteBackQueue(store)
        self.breaking = breaking or BreakingConfig()
        self.international = international or InternationalConfig()

    @property
    def search_sources(self) -> list[NewsSource]:
        return [s for s in self.sources if s.supports_search]

    async def close(self) -> None:
        """Flush pending writes and close every source client."""
        await self.writeback.close()
        for source in self.sources:
            await source.close()

    # =========================================================================
    # Listings
    # =========================================================================

    async def get_headlines(
        self,
        category: Optional[NewsCategory] = None,
        page: int = 1,
        page_size: int = PAGE_SIZE_DEFAULT,
    ) -> PagedArticles:
        """One page of headlines for ``category`` (None = all topics).

        Served straight from the cache when the cached page holds a row
        scraped within the fresh window; otherwise the source chain is
        walked and merged with the cached rows.
        """
        validate_paging(page, page_size)
        now = now_utc()
        cached = await self._cached_page(category, page, page_size, now)
        state = self.policy.evaluate(cached, now=now)

        if state == CacheState.FRESH_HIT:
            return await self._serve_cache(category, cached, page, page_size, now)
        return await self._refetch(category, page, page_size, cached, now)

    async def refresh(
        self,
        category: Optional[NewsCategory] = None,
        page: int = 1,
        page_size: int = PAGE_SIZE_DEFAULT,
        force: bool = False,
    ) -> PagedArticles:
        """Refresh a listing.

        With ``force``, expired rows are purged first and the source chain
        is walked regardless of cache freshness. Without it this behaves
        like ``get_headlines``.
        """
        validate_paging(page, page_size)
        if not force:
            return await self.get_headlines(category, page, page_size)

        now = now_utc()
        purged = await asyncio.to_thread(self.policy.purge, self.store, now)
        logger.info(f"NEWS_PURGE | removed:{purged} | category:{_label(category)}")

        cached = await self._cached_page(category, page, page_size, now)
        return await self._refetch(category, page, page_size, cached, now, force=True)

    async def _cached_page(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
        now: datetime,
    ) -> list[Article]:
        return await asyncio.to_thread(
            self.store.find_many,
            self.policy.cache_filter(category, now),
            (page - 1) * page_size,
            page_size,
        )

    async def _serve_cache(
        self,
        category: Optional[NewsCategory],
        cached: list[Article],
        page: int,
        page_size: int,
        now: datetime,
    ) -> PagedArticles:
        total = await asyncio.to_thread(self.store.count, self.policy.cache_filter(category, now))
        logger.info(
            f"NEWS_AGGREGATOR | cache_hit | category:{_label(category)} | page:{page} | "
            f"rows:{len(cached)} | total:{total}"
        )
        return PagedArticles(
            articles=cached,
            pagination=Pagination(
                page=page,
                page_size=page_size,
                total=total,
                has_more=page * page_size < total,
            ),
            from_cache=True,
        )

    async def _refetch(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
        cached: list[Article],
        now: datetime,
        force: bool = False,
    ) -> PagedArticles:
        start_time = time.time()

        breaking: list[Article] = []
        if page == 1 and self.breaking.enabled:
            breaking = await self.fetch_breaking_news(self.breaking.limit)
            if category is not None:
                breaking = [a for a in breaking if a.category == category]

        walked, sources_used = await self._walk(category, page, page_size, now, seed=breaking)

        fetched = deduplicate_articles(breaking + walked)
        merged = deduplicate_articles(fetched + cached)
        ordered = sort_by_recency(merged)[:page_size]

        self.writeback.submit(fetched)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"NEWS_AGGREGATOR | {'force_refresh' if force else 'refetch'} | "
            f"category:{_label(category)} | page:{page} | breaking:{len(breaking)} | "
            f"fetched:{len(fetched)} | cached:{len(cached)} | returned:{len(ordered)} | "
            f"sources:{','.join(sources_used) or 'none'} | {duration_ms}ms"
        )
        if not ordered:
            logger.warning(f"NEWS_EXHAUSTED | category:{_label(category)} | page:{page}")

        return PagedArticles(
            articles=ordered,
            pagination=Pagination(
                page=page,
                page_size=page_size,
                has_more=bool(fetched) and len(merged) >= page_size,
            ),
            sources_used=sources_used,
        )

    async def _walk(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
        now: datetime,
        seed: Sequence[Article] = (),
    ) -> tuple[list[Article], list[str]]:
        """Try sources in priority order until ``page_size`` unique recent articles.

        Returned articles are recency-filtered, in source priority order.
        A requested category is kept as the article category so the rows land
        in the cache slice that was asked for; without one the categorizer
        classifies each article. ``seed`` counts towards the target but is not
        included in the result.
        """
        collected: list[Article] = []
        sources_used: list[str] = []

        for source in self.sources:
            if not source.available:
                continue
            batch = await source.fetch_headlines(category, page, page_size)
            batch = [
                a for a in self._assign_categories(batch, category)
                if self.policy.is_recent(a, now)
            ]
            if not batch:
                logger.debug(f"NEWS_FALLBACK | {source.name} empty, trying next source")
                continue

            collected.extend(batch)
            sources_used.append(source.name)
            if len(deduplicate_articles([*seed, *collected])) >= page_size:
                break

        return collected, sources_used

    def _assign_categories(
        self,
        articles: Sequence[Article],
        category: Optional[NewsCategory],
    ) -> list[Article]:
        if category is None:
            return self.categorizer.categorize_all(articles)
        return [a if a.category == category else a.with_category(category) for a in articles]

    # =========================================================================
    # Search
    # =========================================================================

    async def search(
        self,
        query: str,
        page: int = 1,
        page_size: int = PAGE_SIZE_DEFAULT,
    ) -> PagedArticles:
        """Search the providers, newest first, dropping anything older than the retention window.

        Search never short-circuits on the cache. The primary search
        source is asked first; the next search-capable source is tried
        only when it yields nothing recent.
        """
        if not query or not query.strip():
            raise InvalidRequestError("search query must not be blank")
        validate_paging(page, page_size)

        start_time = time.time()
        now = now_utc()
        query = query.strip()
        results: list[Article] = []
        raw_count = 0
        used = "none"

        for source in self.search_sources:
            if not source.available:
                continue
            raw = await source.search(query, page, page_size)
            recent = [a for a in raw if self.policy.is_recent(a, now)]
            if recent:
                raw_count = len(raw)
                results = recent
                used = source.name
                break

        results = sort_by_recency(deduplicate_articles(self.categorizer.categorize_all(results)))
        self.writeback.submit(results)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"NEWS_SEARCH | query:{query} | source:{used} | raw:{raw_count} | "
            f"recent:{len(results)} | {duration_ms}ms"
        )
        return PagedArticles(
            articles=results[:page_size],
            pagination=Pagination(page=page, page_size=page_size, has_more=raw_count >= page_size),
            sources_used=[used] if results else [],
        )

    async def fetch_breaking_news(self, limit: int = 5) -> list[Article]:
        """Recent hits for the urgency keywords, newest first, at most ``limit`` (capped at 10).

        Keywords are searched concurrently on the first available
        search-capable source and merged in keyword order.
        """
        limit = min(max(limit, 0), BREAKING_LIMIT_MAX)
        source = next((s for s in self.search_sources if s.available), None)
        if limit == 0 or source is None or not self.breaking.keywords:
            return []

        now = now_utc()
        per_keyword = self.breaking.results_per_keyword
        batches = await asyncio.gather(
            *(source.search(keyword, 1, per_keyword) for keyword in self.breaking.keywords)
        )

        hits = [article for batch in batches for article in batch]
        hits = [a for a in self.categorizer.categorize_all(hits) if self.policy.is_recent(a, now)]
        breaking = sort_by_recency(deduplicate_articles(hits))[:limit]

        logger.info(
            f"NEWS_BREAKING | source:{source.name} | hits:{len(hits)} | kept:{len(breaking)}"
        )
        return breaking

    # =========================================================================
    # Top stories
    # =========================================================================

    async def top_stories(self, page_size: int = 30) -> PagedArticles:
        """Latest, international and general headlines combined into one ranked page."""
        validate_paging(1, page_size)
        start_time = time.time()
        now = now_utc()

        combined: list[Article] = []
        primary = next(
            (s for s in self.sources if isinstance(s, NewsAPISource) and s.available), None
        )
        if primary is not None:
            combined.extend(await primary.fetch_latest(10))
            combined.extend(await primary.fetch_international(
                self.international.countries[: self.international.max_countries], 10,
            ))
        walked, sources_used = await self._walk(None, 1, 10, now)

        combined = [
            a for a in self.categorizer.categorize_all(combined)
            if self.policy.is_recent(a, now)
        ]
        stories = sort_by_recency(deduplicate_articles(combined + walked))[:page_size]
        self.writeback.submit(stories)

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"NEWS_TOP_STORIES | returned:{len(stories)} | {duration_ms}ms")
        return PagedArticles(
            articles=stories,
            pagination=Pagination(page=1, page_size=page_size, has_more=False),
            sources_used=([primary.name] if primary else []) + sources_used,
        )


def _label(category: Optional[NewsCategory]) -> str:
    return category.value if category else "all"
