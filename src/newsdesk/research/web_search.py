"""Web search context for the news assistant, using DuckDuckGo."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlparse

from ddgs import DDGS

from newsdesk.constants import TIMEOUT_SOURCE_SECONDS

logger = logging.getLogger("ai_calls")

# Conversational lead-ins that make poor search queries
_QUERY_PREFIX = re.compile(
    r"^(please|can you|could you|search|find|look up|tell me about|what is|what are)\s+",
    re.IGNORECASE,
)


def clean_query(message: str) -> str:
    """Turn a chat message into a search query."""
    return _QUERY_PREFIX.sub("", message.strip()).strip()


@dataclass
class WebSearchResult:
    """A single search hit."""

    title: str
    url: str
    snippet: str

    @property
    def domain(self) -> str:
        return urlparse(self.url).netloc.replace("www.", "")


@dataclass
class WebSearchResponse:
    """Hits for one query."""

    query: str
    results: list[WebSearchResult] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None
    duration_ms: int = 0

    def to_context_string(self, max_sources: int = 5) -> str:
        """Format the hits as a context block for the assistant prompt."""
        if not self.results:
            return "No search results found for this query."

        lines = [f'## Internet Search Results for: "{self.query}"', ""]
        for index, result in enumerate(self.results[:max_sources], start=1):
            lines.append(f"**Search Result {index}:**")
            lines.append(f"Title: {result.title}")
            lines.append(f"URL: {result.url}")
            lines.append(f"Content: {result.snippet or 'No content available'}")
            lines.append("")
            lines.append("---")
        return "\n".join(lines)


class WebSearcher:
    """DuckDuckGo text search run off the event loop.

    Usage:
        searcher = WebSearcher()
        response = await searcher.search("ceasefire talks")
        context = response.to_context_string()
    """

    def __init__(self, timeout: float = TIMEOUT_SOURCE_SECONDS, max_results: int = 5):
        self.timeout = timeout
        self.max_results = max_results

    async def search(self, query: str, max_results: Optional[int] = None) -> WebSearchResponse:
        """Search the web. Failures and timeouts give an empty, unsuccessful response."""
        max_results = max_results or self.max_results
        start_time = time.time()

        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self._ddgs_search_sync, query, max_results),
                timeout=self.timeout,
            )
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(f"WEB_SEARCH_ERROR | query:{query[:50]} | {type(e).__name__}: {e}")
            return WebSearchResponse(query=query, success=False, error=str(e), duration_ms=duration_ms)

        results = [
            WebSearchResult(
                title=r.get("title") or "No title",
                url=r["href"],
                snippet=(r.get("body") or "")[:300],
            )
            for r in raw
            if r.get("href")
        ]
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(f"WEB_SEARCH | query:{query[:50]} | results:{len(results)} | {duration_ms}ms")
        return WebSearchResponse(query=query, results=results, duration_ms=duration_ms)

    def _ddgs_search_sync(self, query: str, max_results: int) -> list[dict]:
        with DDGS(timeout=int(self.timeout)) as ddgs:
            return list(ddgs.text(query, max_results=max_results))
