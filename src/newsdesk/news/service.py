"""Entry point the rest of the application calls into.

``NewsService`` wraps the aggregator, enricher and chat assistant behind
request-shaped methods that accept loose inputs (category labels, page
numbers) and return JSON-ready dictionaries. Construct one per process with
``build_news_service`` and pass it to handlers.

Usage:
    service = build_news_service(NewsdeskSettings())
    try:
        data = await service.get_articles(category="sports", page=1)
    finally:
        await service.close()
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Union

import httpx

from newsdesk.constants import BREAKING_LIMIT_MAX, PAGE_SIZE_DEFAULT
from newsdesk.news.aggregator import NewsAggregator
from newsdesk.news.categorizer import Categorizer
from newsdesk.news.chat import NewsChatbot
from newsdesk.news.enricher import ContentEnricher
from newsdesk.news.errors import InvalidRequestError
from newsdesk.news.freshness import FreshnessPolicy
from newsdesk.news.models import NewsCategory
from newsdesk.news.sources.browser import RenderedArticleScraper
from newsdesk.news.sources.registry import SourceRegistry, create_sources
from newsdesk.news.writeback import WriteBackQueue
from newsdesk.providers.config import NewsdeskSettings, load_provider_config
from newsdesk.providers.text import TextProvider
from newsdesk.research.web_search import WebSearcher
from newsdesk.storage.base import ArticleStore
from newsdesk.storage.json_store import JsonArticleStore

logger = logging.getLogger("news")

CategoryInput = Union[NewsCategory, str, None]

CHAT_ARTICLE_COUNT = 10


def parse_category(value: CategoryInput) -> Optional[NewsCategory]:
    """Resolve a category label. None, "" and "all" mean every category.

    Raises:
        InvalidRequestError: For a label that names no known category.
    """
    if value is None or isinstance(value, NewsCategory):
        return value
    label = value.strip().lower()
    if label in ("", "all"):
        return None
    category = NewsCategory.parse(label)
    if category is None:
        raise InvalidRequestError(f"Unknown category: {value!r}")
    return category


class NewsService:
    """Request-facing facade over the ingestion pipeline."""

    def __init__(
        self,
        aggregator: NewsAggregator,
        enricher: ContentEnricher,
        chatbot: Optional[NewsChatbot] = None,
    ):
        self.aggregator = aggregator
        self.enricher = enricher
        self.chatbot = chatbot or NewsChatbot()

    @property
    def store(self) -> ArticleStore:
        return self.aggregator.store

    async def get_articles(
        self,
        category: CategoryInput = None,
        page: int = 1,
        page_size: int = PAGE_SIZE_DEFAULT,
        search: Optional[str] = None,
    ) -> dict[str, Any]:
        """Headline query: ``{"articles": [...], "pagination": {...}}``."""
        if search is not None and search.strip():
            result = await self.aggregator.search(search, page, page_size)
        else:
            result = await self.aggregator.get_headlines(parse_category(category), page, page_size)
        return result.to_dict()

    async def refresh(
        self,
        force_refresh: bool = False,
        category: CategoryInput = None,
        page: int = 1,
        page_size: int = PAGE_SIZE_DEFAULT,
    ) -> dict[str, Any]:
        """Refresh query, same shape as ``get_articles``."""
        result = await self.aggregator.refresh(
            parse_category(category), page, page_size, force=force_refresh,
        )
        return result.to_dict()

    async def enrich(self, url: str) -> dict[str, Any]:
        """Full text for one article: ``{"content", "imageUrl"?, "publishedAt"?, "author"?}``."""
        result = await self.enricher.enrich(url)
        return result.to_dict()

    async def top_stories(self, page_size: int = 30) -> dict[str, Any]:
        result = await self.aggregator.top_stories(page_size)
        return result.to_dict()

    async def ask(self, message: str, category: CategoryInput = None, web_search: bool = False) -> str:
        """Answer ``message`` using the current headlines for ``category``.

        With ``web_search`` the prompt also carries web search results.
        """
        if not message or not message.strip():
            raise InvalidRequestError("message must not be blank")
        page = await self.aggregator.get_headlines(parse_category(category), 1, CHAT_ARTICLE_COUNT)
        return await self.chatbot.respond(message.strip(), page.articles, web_search=web_search)

    # =========================================================================
    # Maintenance
    # =========================================================================

    async def purge(self) -> int:
        """Delete expired, unpinned rows."""
        removed = await asyncio.to_thread(self.aggregator.policy.purge, self.store)
        logger.info(f"NEWS_PURGE | removed:{removed}")
        return removed

    async def clear(self) -> int:
        """Delete every unpinned row."""
        removed = await asyncio.to_thread(self.store.delete_many, None)
        logger.info(f"NEWS_CLEAR | removed:{removed}")
        return removed

    async def pin(self, url: str) -> None:
        await asyncio.to_thread(self.store.pin, url)

    async def unpin(self, url: str) -> None:
        await asyncio.to_thread(self.store.unpin, url)

    async def close(self) -> None:
        """Flush write-back and release source clients."""
        await self.aggregator.close()


def build_news_service(
    settings: NewsdeskSettings,
    registry: Optional[SourceRegistry] = None,
    store: Optional[ArticleStore] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> NewsService:
    """Wire the pipeline from settings.

    Args:
        settings: API keys, paths and windows.
        registry: Source configuration (loaded from ``settings.sources_path``
            or the default path when None).
        store: Article store (``JsonArticleStore`` at ``settings.store_path`` when None).
        client: Shared HTTP client for every source.
    """
    registry = registry or SourceRegistry.load_or_default(settings.sources_path)
    if store is None:
        store = JsonArticleStore(settings.store_path)
    breaking = registry.breaking
    if settings.breaking_limit is not None:
        breaking = breaking.model_copy(update={"limit": min(settings.breaking_limit, BREAKING_LIMIT_MAX)})

    aggregator = NewsAggregator(
        sources=create_sources(registry, settings, client=client),
        store=store,
        categorizer=Categorizer(registry.category_keywords()),
        policy=FreshnessPolicy.from_settings(settings),
        writeback=WriteBackQueue(store),
        breaking=breaking,
        international=registry.international,
    )
    enricher = ContentEnricher(RenderedArticleScraper(timeout=settings.scrape_timeout_seconds))
    chatbot = NewsChatbot(
        TextProvider(load_provider_config(settings.providers_path)),
        WebSearcher(timeout=settings.request_timeout_seconds),
    )
    return NewsService(aggregator, enricher, chatbot)
