"""News source adapters and their configuration.

Every listing source converts its provider payload into ``Article`` and
never raises out of ``fetch_headlines`` / ``search``. Sources are tried in
priority order by the aggregator.

Usage:
    from newsdesk.news.sources import SourceRegistry, create_sources

    registry = SourceRegistry.load_or_default()
    sources = create_sources(registry, settings)
"""

from .base import NewsSource
from .browser import RenderedArticleScraper, chromium_page
from .gnews import GNewsSource
from .guardian import GuardianSource
from .models import (
    BreakingConfig,
    CommunityConfig,
    InternationalConfig,
    NewsSourcesConfig,
    SourceConfig,
)
from .newsapi import NewsAPISource
from .reddit import RedditSource
from .registry import SourceRegistry, create_sources

__all__ = [
    # Adapters
    "NewsSource",
    "NewsAPISource",
    "GNewsSource",
    "GuardianSource",
    "RedditSource",
    "RenderedArticleScraper",
    "chromium_page",
    # Config
    "NewsSourcesConfig",
    "SourceConfig",
    "CommunityConfig",
    "BreakingConfig",
    "InternationalConfig",
    # Registry
    "SourceRegistry",
    "create_sources",
]
