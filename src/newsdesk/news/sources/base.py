"""Adapter boundary shared by every listing source.

Subclasses implement ``_fetch_headlines`` (and ``_search`` when the provider
has a query endpoint) and may raise freely. The public ``fetch_headlines`` /
``search`` wrappers enforce the contract the aggregator relies on: a missing
key, an HTTP error, a malformed payload or a timeout all come back as an
empty list, logged as ``SOURCE_UNAVAILABLE``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

import httpx

from newsdesk.constants import TIMEOUT_SOURCE_SECONDS
from newsdesk.news.errors import SourceUnavailable
from newsdesk.news.models import Article, NewsCategory

logger = logging.getLogger("news.sources")

USER_AGENT = "newsdesk/0.1 (+https://github.com/newsdesk)"


class NewsSource(ABC):
    """One provider in the fallback chain."""

    name: str = "source"
    requires_key: bool = True
    supports_search: bool = False

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = TIMEOUT_SOURCE_SECONDS,
        priority: int = 1,
    ):
        """Initialize the source.

        Args:
            api_key: Provider credential (ignored by keyless sources).
            client: Shared HTTP client. Created lazily when None.
            timeout: Whole-call timeout in seconds.
            priority: Position in the fallback chain (1 = tried first).
        """
        self.api_key = api_key
        self.timeout = timeout
        self.priority = priority
        self._client = client
        self._owns_client = client is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority}, available={self.available})"

    @property
    def available(self) -> bool:
        """Whether the source can be called (credentials present)."""
        return bool(self.api_key) or not self.requires_key

    # =========================================================================
    # HTTP
    # =========================================================================

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def _get_json(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """GET ``url`` and return the decoded JSON object.

        Raises:
            SourceUnavailable: On a non-2xx status or a non-object body.
        """
        response = await self._get_client().get(url, params=params, headers=headers)
        if response.status_code >= 400:
            raise SourceUnavailable(self.name, f"HTTP {response.status_code}: {response.text[:200]}")
        try:
            data = response.json()
        except ValueError as e:
            raise SourceUnavailable(self.name, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SourceUnavailable(self.name, "unexpected payload shape")
        return data

    # =========================================================================
    # Boundary
    # =========================================================================

    async def _guarded(
        self,
        operation: str,
        call: Callable[[], Awaitable[list[Article]]],
    ) -> list[Article]:
        """Run ``call`` under the timeout and convert every failure to []."""
        if not self.available:
            logger.debug(f"SOURCE_UNAVAILABLE | {self.name} | {operation} | missing credentials")
            return []

        start_time = time.time()
        try:
            articles = await asyncio.wait_for(call(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"SOURCE_UNAVAILABLE | {self.name} | {operation} | timeout after {self.timeout}s"
            )
            return []
        except Exception as e:
            logger.warning(
                f"SOURCE_UNAVAILABLE | {self.name} | {operation} | {type(e).__name__}: {e}"
            )
            return []

        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"SOURCE_OK | {self.name} | {operation} | {len(articles)} articles | {duration_ms}ms")
        return articles

    async def fetch_headlines(
        self,
        category: Optional[NewsCategory] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> list[Article]:
        """Fetch a listing for ``category`` (None = all). Never raises."""
        return await self._guarded(
            f"headlines:{category.value if category else 'all'}",
            lambda: self._fetch_headlines(category, page, page_size),
        )

    async def search(self, query: str, page: int = 1, page_size: int = 20) -> list[Article]:
        """Free-text search, newest first. Never raises; [] when unsupported."""
        if not self.supports_search:
            return []
        return await self._guarded(
            f"search:{query}",
            lambda: self._search(query, page, page_size),
        )

    @abstractmethod
    async def _fetch_headlines(
        self,
        category: Optional[NewsCategory],
        page: int,
        page_size: int,
    ) -> list[Article]:
        ...

    async def _search(self, query: str, page: int, page_size: int) -> list[Article]:
        raise NotImplementedError(f"{self.name} does not support search")
