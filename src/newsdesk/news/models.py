"""Data models for news ingestion and caching."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from newsdesk.utils.timestamps import format_timestamp, now_utc, parse_timestamp_lenient


class NewsCategory(str, Enum):
    """Topic categories shared with the UI filter controls."""

    TECHNOLOGY = "technology"
    POLITICS = "politics"
    BUSINESS = "business"
    HEALTH = "health"
    SPORTS = "sports"
    ENTERTAINMENT = "entertainment"
    SCIENCE = "science"
    WORLD = "world"
    ENVIRONMENT = "environment"
    ECONOMY = "economy"
    GENERAL = "general"

    @property
    def display_name(self) -> str:
        """Human-readable category label."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, label: Optional[str]) -> Optional["NewsCategory"]:
        """Map a free-form or provider label onto the enumeration.

        Returns None for empty input, the "all" pseudo-category and labels
        with no known mapping.
        """
        if isinstance(label, cls):
            return label
        if not label:
            return None
        key = str(label).strip().lower()
        if not key or key == "all":
            return None
        try:
            return cls(key)
        except ValueError:
            return _CATEGORY_ALIASES.get(key)


_CATEGORY_ALIASES: dict[str, NewsCategory] = {
    "tech": NewsCategory.TECHNOLOGY,
    "sport": NewsCategory.SPORTS,
    "football": NewsCategory.SPORTS,
    "international": NewsCategory.WORLD,
    "world news": NewsCategory.WORLD,
    "nation": NewsCategory.GENERAL,
    "us-news": NewsCategory.GENERAL,
    "uk-news": NewsCategory.GENERAL,
    "money": NewsCategory.ECONOMY,
    "economics": NewsCategory.ECONOMY,
    "finance": NewsCategory.BUSINESS,
    "climate": NewsCategory.ENVIRONMENT,
    "film": NewsCategory.ENTERTAINMENT,
    "music": NewsCategory.ENTERTAINMENT,
    "culture": NewsCategory.ENTERTAINMENT,
    "tv-and-radio": NewsCategory.ENTERTAINMENT,
    "breaking": NewsCategory.GENERAL,
}


@dataclass
class Article:
    """Canonical article shape produced by every source adapter.

    ``url`` is the identity: the dedup key within one aggregation and the
    upsert key in the article store.
    """

    title: str
    url: str
    source: str
    published_at: datetime
    summary: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = None
    author: Optional[str] = None
    category: Optional[NewsCategory] = None
    scraped_at: datetime = field(default_factory=now_utc)

    def with_category(self, category: NewsCategory) -> "Article":
        """Return a copy with ``category`` set."""
        return replace(self, category=category)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage and API-shaped responses."""
        return {
            "title": self.title,
            "summary": self.summary,
            "content": self.content,
            "url": self.url,
            "imageUrl": self.image_url,
            "author": self.author,
            "source": self.source,
            "category": (self.category or NewsCategory.GENERAL).value,
            "publishedAt": format_timestamp(self.published_at),
            "scrapedAt": format_timestamp(self.scraped_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        """Rebuild an article from ``to_dict`` output."""
        scraped_at = parse_timestamp_lenient(data.get("scrapedAt")) or now_utc()
        return cls(
            title=data["title"],
            url=data["url"],
            source=data.get("source") or "Unknown",
            published_at=parse_timestamp_lenient(data.get("publishedAt")) or scraped_at,
            summary=data.get("summary"),
            content=data.get("content"),
            image_url=data.get("imageUrl"),
            author=data.get("author"),
            category=NewsCategory.parse(data.get("category")) or NewsCategory.GENERAL,
            scraped_at=scraped_at,
        )


@dataclass
class Pagination:
    """Paging metadata returned alongside a list of articles."""

    page: int
    page_size: int
    total: Optional[int] = None
    has_more: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "page": self.page,
            "pageSize": self.page_size,
            "hasMore": self.has_more,
        }
        if self.total is not None:
            data["total"] = self.total
        return data


@dataclass
class PagedArticles:
    """One page of articles, as handed back to callers."""

    articles: list[Article]
    pagination: Pagination
    from_cache: bool = False
    sources_used: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls, page: int, page_size: int) -> "PagedArticles":
        """Page with no articles and no further pages."""
        return cls(articles=[], pagination=Pagination(page=page, page_size=page_size, has_more=False))

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [a.to_dict() for a in self.articles],
            "pagination": self.pagination.to_dict(),
        }


@dataclass
class EnrichedContent:
    """Full-text extraction result for a single article URL."""

    content: str
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    author: Optional[str] = None
    extracted: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting optional fields that were not found."""
        data: dict[str, Any] = {"content": self.content}
        if self.image_url:
            data["imageUrl"] = self.image_url
        if self.published_at:
            data["publishedAt"] = format_timestamp(self.published_at)
        if self.author:
            data["author"] = self.author
        return data
