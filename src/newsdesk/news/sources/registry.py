"""Source registry for loading news source configuration.

Usage:
    from newsdesk.news.sources import SourceRegistry

    registry = SourceRegistry.load_or_default(Path("config/news_sources.yaml"))
    for source_config in registry.enabled_sources:
        ...
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml
from pydantic import ValidationError

from newsdesk.news.models import NewsCategory
from newsdesk.news.sources.base import NewsSource
from newsdesk.news.sources.gnews import GNewsSource
from newsdesk.news.sources.guardian import GuardianSource
from newsdesk.news.sources.models import (
    BreakingConfig,
    CommunityConfig,
    InternationalConfig,
    NewsSourcesConfig,
    SourceConfig,
)
from newsdesk.news.sources.newsapi import NewsAPISource
from newsdesk.news.sources.reddit import RedditSource

logger = logging.getLogger("news.sources")


class SourceRegistry:
    """Typed access to ``news_sources.yaml``."""

    # Default path for config file
    DEFAULT_CONFIG_PATH = Path("config/news_sources.yaml")

    def __init__(self, config: Optional[NewsSourcesConfig] = None):
        self._config = config or NewsSourcesConfig()

    @classmethod
    def resolve_path(cls, config_path: Optional[Path] = None) -> Path:
        """Resolve ``config_path`` against the working directory, then the project root."""
        path = Path(config_path) if config_path else cls.DEFAULT_CONFIG_PATH
        if not path.is_absolute() and not path.exists():
            project_root = Path(__file__).parents[4]  # src/newsdesk/news/sources -> project root
            path = project_root / path
        return path

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "SourceRegistry":
        """Load configuration from YAML file.

        Raises:
            FileNotFoundError: If config file doesn't exist.
            ValueError: If YAML is invalid.
        """
        path = cls.resolve_path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"News sources config not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

        try:
            config = NewsSourcesConfig(**data)
        except (TypeError, ValidationError) as e:
            raise ValueError(f"Invalid config structure in {path}: {e}") from e

        logger.info(
            f"SOURCE_REGISTRY | loaded={path.name} | "
            f"sources={','.join(s.name for s in config.enabled_sources)} | "
            f"categories={len(config.categories)}"
        )
        return cls(config)

    @classmethod
    def load_or_default(cls, config_path: Optional[Path] = None) -> "SourceRegistry":
        """Load the YAML file, or fall back to built-in defaults when it is missing."""
        try:
            return cls.load(config_path)
        except FileNotFoundError:
            logger.warning("SOURCE_REGISTRY | config not found, using built-in defaults")
            return cls()

    @property
    def config(self) -> NewsSourcesConfig:
        """Get the underlying configuration."""
        return self._config

    @property
    def enabled_sources(self) -> list[SourceConfig]:
        return self._config.enabled_sources

    @property
    def community(self) -> CommunityConfig:
        return self._config.community

    @property
    def breaking(self) -> BreakingConfig:
        return self._config.breaking

    @property
    def international(self) -> InternationalConfig:
        return self._config.international

    def is_enabled(self, name: str) -> bool:
        source = self._config.get_source(name)
        return bool(source and source.enabled)

    def category_keywords(self) -> dict[NewsCategory, list[str]]:
        return self._config.category_keywords()

    def get_stats(self) -> dict:
        """Summary used by the CLI ``sources`` listing."""
        return {
            "version": self._config.version,
            "country": self._config.country,
            "sources": [
                {"name": s.name, "priority": s.priority, "enabled": s.enabled}
                for s in sorted(self._config.sources, key=lambda s: s.priority)
            ],
            "breaking_keywords": list(self._config.breaking.keywords),
            "categories": list(self._config.categories),
        }


def create_sources(
    registry: SourceRegistry,
    settings: Any,
    client: Optional[httpx.AsyncClient] = None,
) -> list[NewsSource]:
    """Instantiate the enabled listing sources in fallback order.

    Args:
        registry: Loaded source configuration.
        settings: ``NewsdeskSettings`` (API keys and timeout).
        client: Optional shared HTTP client for every source.
    """
    config = registry.config
    api_keys = {
        "newsapi": settings.news_api_key,
        "gnews": settings.gnews_api_key,
        "guardian": settings.guardian_api_key,
    }

    sources: list[NewsSource] = []
    for source_config in config.enabled_sources:
        common = {
            "client": client,
            "timeout": source_config.timeout_seconds or settings.request_timeout_seconds,
            "priority": source_config.priority,
        }
        name = source_config.name
        if name == "newsapi":
            source: NewsSource = NewsAPISource(
                api_keys[name], country=config.country, language=config.language, **common,
            )
        elif name == "gnews":
            source = GNewsSource(
                api_keys[name], country=config.country, language=config.language, **common,
            )
        elif name == "guardian":
            source = GuardianSource(api_keys[name], **common)
        else:
            source = RedditSource(config.community, **common)
        sources.append(source)

    logger.info(
        "SOURCE_REGISTRY | chain="
        + ",".join(f"{s.name}{'' if s.available else '(no key)'}" for s in sources)
    )
    return sources
