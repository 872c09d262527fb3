"""Primary headline source: newsapi.org."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Optional, Sequence

from newsdesk.constants import WINDOW_LATEST_HOURS
from newsdesk.news.errors import SourceUnavailable
from newsdesk.news.models import Article, NewsCategory
from newsdesk.news.normalize import build_article
from newsdesk.news.sources.base import NewsSource
from newsdesk.utils.timestamps import now_utc

logger = logging.getLogger("news.sources")

# Categories /top-headlines accepts. Others are served through /everything.
TOP_HEADLINE_CATEGORIES = frozenset({
    NewsCategory.BUSINESS,
    NewsCategory.ENTERTAINMENT,
    NewsCategory.GENERAL,
    NewsCategory.HEALTH,
    NewsCategory.SCIENCE,
    NewsCategory.SPORTS,
    NewsCategory.TECHNOLOGY,
})

BROAD_QUERY = (
    'breaking OR latest OR news OR headlines OR "current events" '
    "OR international OR world OR national"
)
LATEST_QUERY = (
    'breaking OR urgent OR latest OR developing OR "just in" '
    "OR news OR headlines OR international OR world"
)

# NewsAPI keeps takedown placeholders in listings
_REMOVED = "[Removed]"


class NewsAPISource(NewsSource):
    """newsapi.org adapter.

    Category listings use ``/top-headlines`` when the provider knows the
    category and ``/everything`` with the category name otherwise. A listing
    with no category is a broad relevance query over the last 24 hours,
    sorted newest first, so default results stay fresh.
    """

    name = "newsapi"
    supports_search = True
    BASE_URL = "https://newsapi.org/v2"

    def __init__(self, *args: Any, country: str = "us", language: str = "en", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.country = country
        self.language = language

    async def _request(self, endpoint: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        data = await self._get_json(
            f"{self.BASE_URL}/{endpoint}",
            params=params,
            headers={"X-Api-Key": self.api_key or ""},
        )
        if data.get("status") != "ok":
            raise SourceUnavailable(self.name, data.get("message") or data.get("code") or "status not ok")
        rows = data.get("articles")
        if not isinstance(rows, list):
            raise SourceUnavailable(self.name, "missing articles list")
        return rows

    def _to_articles(
        self,
        rows: Sequence[dict[str, Any]],
        category: Optional[NewsCategory],
    ) -> list[Article]:
        articles = []
        for row in rows:
            if not isinstance(row, dict) or row.get("title") == _REMOVED:
                continue
            source = row.get("source") or {}
            article = build_article(
                title=row.get("title"),
                url=row.get("url"),
                source=source.get("name") if isinstance(source, dict) else None,
                published=row.get("publishedAt"),
                description=row.get("description"),
                content=row.get("content"),
                image_url=row.get("urlToImage"),
                author=row.get("author"),
                category=category,
            )
            if article is not None:
                articles.append(article)
        return articles

    def _recent_window_start(self) -> str:
        since = now_utc() - timedelta(hours=WINDOW_LATEST_HOURS)
        return since.replace(microsecond=0).isoformat()

    async def _fetch_headlines(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
    ) -> list[Article]:
        params: dict[str, Any] = {"page": page, "pageSize": page_size}

        if category is None:
            params.update({
                "q": BROAD_QUERY,
                "sortBy": "publishedAt",
                "language": self.language,
                "from": self._recent_window_start(),
            })
            rows = await self._request("everything", params)
        elif category in TOP_HEADLINE_CATEGORIES:
            params.update({"country": self.country, "category": category.value})
            rows = await self._request("top-headlines", params)
        else:
            params.update({
                "q": category.value,
                "sortBy": "publishedAt",
                "language": self.language,
            })
            rows = await self._request("everything", params)

        return self._to_articles(rows, category)

    async def _search(self, query: str, page: int, page_size: int) -> list[Article]:
        rows = await self._request("everything", {
            "q": query,
            "page": page,
            "pageSize": page_size,
            "language": self.language,
            "sortBy": "publishedAt",
        })
        return self._to_articles(rows, None)

    # =========================================================================
    # Top-stories helpers
    # =========================================================================

    async def fetch_latest(self, page_size: int = 20) -> list[Article]:
        """Newest articles of the last 24 hours across all topics."""
        async def call() -> list[Article]:
            rows = await self._request("everything", {
                "q": LATEST_QUERY,
                "language": self.language,
                "sortBy": "publishedAt",
                "from": self._recent_window_start(),
                "pageSize": page_size,
            })
            return self._to_articles(rows, None)

        return await self._guarded("latest", call)

    async def fetch_international(
        self,
        countries: Sequence[str],
        page_size: int = 15,
        per_country: int = 5,
    ) -> list[Article]:
        """General top headlines from several countries, newest first.

        Countries are polled in order until ``page_size`` articles are
        collected; a failing country is skipped.
        """
        results: list[Article] = []
        seen: set[str] = set()
        for country in countries:
            async def call(country: str = country) -> list[Article]:
                rows = await self._request("top-headlines", {
                    "country": country,
                    "category": NewsCategory.GENERAL.value,
                    "pageSize": per_country,
                })
                return self._to_articles(rows, NewsCategory.WORLD)

            for article in await self._guarded(f"international:{country}", call):
                if article.url not in seen:
                    seen.add(article.url)
                    results.append(article)
            if len(results) >= page_size:
                break

        results.sort(key=lambda a: a.published_at, reverse=True)
        return results[:page_size]
