"""Secondary headline source: gnews.io."""

from __future__ import annotations

from typing import Any, Optional

from newsdesk.news.errors import SourceUnavailable
from newsdesk.news.models import Article, NewsCategory
from newsdesk.news.normalize import build_article
from newsdesk.news.sources.base import NewsSource

# Canonical category -> GNews topic
CATEGORY_TOPICS: dict[NewsCategory, str] = {
    NewsCategory.GENERAL: "general",
    NewsCategory.WORLD: "world",
    NewsCategory.POLITICS: "nation",
    NewsCategory.BUSINESS: "business",
    NewsCategory.ECONOMY: "business",
    NewsCategory.TECHNOLOGY: "technology",
    NewsCategory.ENTERTAINMENT: "entertainment",
    NewsCategory.SPORTS: "sports",
    NewsCategory.SCIENCE: "science",
    NewsCategory.ENVIRONMENT: "science",
    NewsCategory.HEALTH: "health",
}


class GNewsSource(NewsSource):
    """gnews.io adapter (lower quota, used when the primary is absent or empty)."""

    name = "gnews"
    supports_search = True
    BASE_URL = "https://gnews.io/api/v4"

    def __init__(self, *args: Any, country: str = "us", language: str = "en", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.country = country
        self.language = language

    async def _request(self, endpoint: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        params = {"token": self.api_key, "lang": self.language, **params}
        data = await self._get_json(f"{self.BASE_URL}/{endpoint}", params=params)
        if data.get("errors"):
            raise SourceUnavailable(self.name, str(data["errors"]))
        rows = data.get("articles")
        if not isinstance(rows, list):
            raise SourceUnavailable(self.name, "missing articles list")
        return rows

    def _to_articles(self, rows: list[dict[str, Any]], category: Optional[NewsCategory]) -> list[Article]:
        articles = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            source = row.get("source") or {}
            article = build_article(
                title=row.get("title"),
                url=row.get("url"),
                source=source.get("name") if isinstance(source, dict) else None,
                published=row.get("publishedAt"),
                description=row.get("description"),
                content=row.get("content"),
                image_url=row.get("image"),
                category=category,
            )
            if article is not None:
                articles.append(article)
        return articles

    async def _fetch_headlines(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
    ) -> list[Article]:
        params: dict[str, Any] = {"country": self.country, "max": page_size, "page": page}
        if category is not None:
            params["category"] = CATEGORY_TOPICS[category]
        rows = await self._request("top-headlines", params)
        return self._to_articles(rows, category)

    async def _search(self, query: str, page: int, page_size: int) -> list[Article]:
        rows = await self._request("search", {
            "q": query,
            "max": page_size,
            "page": page,
            "sortby": "publishedAt",
        })
        return self._to_articles(rows, None)
