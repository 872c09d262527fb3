"""Session helpers that own the NewsService lifecycle for one CLI invocation."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from newsdesk.news.service import NewsService, build_news_service
from newsdesk.news.sources.registry import SourceRegistry
from newsdesk.providers.config import NewsdeskSettings

T = TypeVar("T")


def load_settings() -> NewsdeskSettings:
    return NewsdeskSettings()


async def _with_service(action: Callable[[NewsService], Awaitable[T]]) -> T:
    service = build_news_service(load_settings())
    try:
        return await action(service)
    finally:
        await service.close()


def run_with_service(action: Callable[[NewsService], Awaitable[T]]) -> T:
    """Build the service, run ``action`` on it and always close it afterwards.

    Closing drains the write-back queue, so articles fetched by the command
    are persisted before the process exits.
    """
    return asyncio.run(_with_service(action))


def source_stats() -> dict[str, Any]:
    """Registry summary plus which sources have credentials configured."""
    settings = load_settings()
    registry = SourceRegistry.load_or_default(settings.sources_path)
    stats = registry.get_stats()
    keys = {
        "newsapi": settings.news_api_key,
        "gnews": settings.gnews_api_key,
        "guardian": settings.guardian_api_key,
    }
    for source in stats["sources"]:
        source["configured"] = source["name"] == "reddit" or bool(keys.get(source["name"]))
    return stats
