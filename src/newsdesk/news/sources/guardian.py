"""Curated-content source: The Guardian open platform."""

from __future__ import annotations

from typing import Any, Optional

from newsdesk.constants import CONTENT_PREVIEW_LENGTH
from newsdesk.news.errors import SourceUnavailable
from newsdesk.news.models import Article, NewsCategory
from newsdesk.news.normalize import build_article
from newsdesk.news.sources.base import NewsSource

# Canonical category -> Guardian section id
CATEGORY_SECTIONS: dict[NewsCategory, str] = {
    NewsCategory.TECHNOLOGY: "technology",
    NewsCategory.BUSINESS: "business",
    NewsCategory.SCIENCE: "science",
    NewsCategory.SPORTS: "sport",
    NewsCategory.POLITICS: "politics",
    NewsCategory.ENVIRONMENT: "environment",
    NewsCategory.WORLD: "world",
    NewsCategory.ENTERTAINMENT: "culture",
    NewsCategory.ECONOMY: "money",
}

# Guardian section id -> canonical category, for untargeted listings
SECTION_CATEGORIES: dict[str, NewsCategory] = {
    section: category for category, section in CATEGORY_SECTIONS.items()
}
SECTION_CATEGORIES.update({
    "football": NewsCategory.SPORTS,
    "film": NewsCategory.ENTERTAINMENT,
    "music": NewsCategory.ENTERTAINMENT,
    "tv-and-radio": NewsCategory.ENTERTAINMENT,
    "books": NewsCategory.ENTERTAINMENT,
    "us-news": NewsCategory.GENERAL,
    "uk-news": NewsCategory.GENERAL,
    "global-development": NewsCategory.WORLD,
    "healthcare-network": NewsCategory.HEALTH,
})


class GuardianSource(NewsSource):
    """content.guardianapis.com adapter.

    Body text is cut to a short preview; the enricher fetches full text on
    demand.
    """

    name = "guardian"
    supports_search = True
    BASE_URL = "https://content.guardianapis.com"
    SOURCE_NAME = "The Guardian"

    async def _request(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        params = {
            "api-key": self.api_key,
            "show-fields": "thumbnail,trailText,bodyText,byline",
            "order-by": "newest",
            **params,
        }
        data = await self._get_json(f"{self.BASE_URL}/search", params=params)
        body = data.get("response")
        if not isinstance(body, dict) or body.get("status") != "ok":
            message = body.get("message") if isinstance(body, dict) else None
            raise SourceUnavailable(self.name, message or "status not ok")
        rows = body.get("results")
        if not isinstance(rows, list):
            raise SourceUnavailable(self.name, "missing results list")
        return rows

    def _to_articles(self, rows: list[dict[str, Any]], category: Optional[NewsCategory]) -> list[Article]:
        articles = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            fields = row.get("fields") or {}
            body_text = fields.get("bodyText")
            preview = body_text[:CONTENT_PREVIEW_LENGTH] if body_text else fields.get("trailText")
            article = build_article(
                title=row.get("webTitle"),
                url=row.get("webUrl"),
                source=self.SOURCE_NAME,
                published=row.get("webPublicationDate"),
                description=fields.get("trailText"),
                content=preview,
                image_url=fields.get("thumbnail"),
                author=fields.get("byline"),
                category=category or SECTION_CATEGORIES.get(row.get("sectionId", "")),
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
        params: dict[str, Any] = {"page": page, "page-size": page_size}
        section = CATEGORY_SECTIONS.get(category) if category else None
        if section:
            params["section"] = section
        elif category is not None and category != NewsCategory.GENERAL:
            params["q"] = category.value
        rows = await self._request(params)
        return self._to_articles(rows, category)

    async def _search(self, query: str, page: int, page_size: int) -> list[Article]:
        rows = await self._request({"q": query, "page": page, "page-size": page_size})
        return self._to_articles(rows, None)
