"""Pydantic models for news source configuration.

These models provide type-safe access to the YAML configuration
in config/news_sources.yaml.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from newsdesk.constants import (
    BREAKING_LIMIT_DEFAULT,
    BREAKING_LIMIT_MAX,
    BREAKING_RESULTS_PER_KEYWORD,
    COMMUNITY_FEEDS_PER_CATEGORY,
)
from newsdesk.news.categorizer import DEFAULT_KEYWORDS
from newsdesk.news.models import NewsCategory

SOURCE_NAMES = ("newsapi", "gnews", "guardian", "reddit")


class SourceConfig(BaseModel):
    """Configuration for a single listing source."""

    name: str
    enabled: bool = True
    priority: int = Field(default=1, ge=1)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)

    @field_validator("name")
    @classmethod
    def known_source(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in SOURCE_NAMES:
            raise ValueError(f"Unknown source '{v}' (expected one of {', '.join(SOURCE_NAMES)})")
        return v


def _default_sources() -> list[SourceConfig]:
    return [SourceConfig(name=name, priority=i) for i, name in enumerate(SOURCE_NAMES, start=1)]


def _default_subreddits() -> dict[str, list[str]]:
    return {
        "technology": ["technology", "programming", "artificial"],
        "business": ["business", "economics", "investing"],
        "science": ["science", "physics", "biology"],
        "health": ["health", "medicine", "fitness"],
        "sports": ["sports", "nfl", "nba"],
        "politics": ["politics", "worldnews", "news"],
        "entertainment": ["entertainment", "movies", "music"],
        "environment": ["environment", "climate"],
        "world": ["worldnews", "news"],
        "economy": ["economics", "economy"],
        "all": ["news", "worldnews", "technology", "science"],
    }


class CommunityConfig(BaseModel):
    """Settings for the keyless community-link fallback."""

    user_agent: str = "newsdesk/0.1 (news aggregation)"
    feeds_per_category: int = Field(default=COMMUNITY_FEEDS_PER_CATEGORY, ge=1)
    subreddits: dict[str, list[str]] = Field(default_factory=_default_subreddits)

    def subreddits_for(self, category: Optional[NewsCategory]) -> list[str]:
        """Subreddits to read for ``category`` (the "all" list when unmapped)."""
        key = category.value if category else "all"
        names = self.subreddits.get(key) or self.subreddits.get("all") or []
        return names[: self.feeds_per_category]


class BreakingConfig(BaseModel):
    """Settings for the breaking-news boost."""

    keywords: list[str] = Field(
        default_factory=lambda: ["breaking", "urgent", "developing", "live", "alert"]
    )
    limit: int = Field(default=BREAKING_LIMIT_DEFAULT, ge=0, le=BREAKING_LIMIT_MAX)
    results_per_keyword: int = Field(default=BREAKING_RESULTS_PER_KEYWORD, ge=1)
    enabled: bool = True


class InternationalConfig(BaseModel):
    """Countries polled for international top headlines."""

    countries: list[str] = Field(default_factory=lambda: ["us", "gb", "ca", "au", "in", "de", "fr", "jp"])
    max_countries: int = Field(default=4, ge=1)


def _default_categories() -> dict[str, list[str]]:
    return {category.value: list(words) for category, words in DEFAULT_KEYWORDS.items()}


class NewsSourcesConfig(BaseModel):
    """Root configuration model for news_sources.yaml."""

    version: str = "1.0"
    country: str = "us"
    language: str = "en"
    sources: list[SourceConfig] = Field(default_factory=_default_sources)
    community: CommunityConfig = Field(default_factory=CommunityConfig)
    breaking: BreakingConfig = Field(default_factory=BreakingConfig)
    international: InternationalConfig = Field(default_factory=InternationalConfig)
    categories: dict[str, list[str]] = Field(default_factory=_default_categories)

    @field_validator("categories")
    @classmethod
    def known_categories(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Category keys must name NewsCategory values."""
        for key in v:
            if NewsCategory.parse(key) is None:
                raise ValueError(f"Unknown category '{key}' in categories table")
        return v

    @property
    def enabled_sources(self) -> list[SourceConfig]:
        """Enabled sources in fallback order (priority, then file order)."""
        return sorted((s for s in self.sources if s.enabled), key=lambda s: s.priority)

    def get_source(self, name: str) -> Optional[SourceConfig]:
        for source in self.sources:
            if source.name == name:
                return source
        return None

    def category_keywords(self) -> dict[NewsCategory, list[str]]:
        """Ordered categorizer table, keyed by enum."""
        table: dict[NewsCategory, list[str]] = {}
        for key, words in self.categories.items():
            category = NewsCategory.parse(key)
            if category is not None:
                table.setdefault(category, []).extend(words)
        return table
