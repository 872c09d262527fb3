"""Render-and-extract adapter for single article pages.

Loads one URL in headless Chromium (Playwright), lets client-side
rendering settle and pulls the body text, lead image, publish date and
author through ordered selector strategies. The browser is launched per
scrape and closed on every exit path.

Usage:
    scraper = RenderedArticleScraper()
    content = await scraper.scrape("https://example.com/story")
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Callable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from newsdesk.constants import (
    AUTHOR_MAX_LENGTH,
    PAGE_SETTLE_MS,
    PARAGRAPH_MAX_COUNT,
    PARAGRAPH_MIN_LENGTH,
    TIMEOUT_PAGE_LOAD_MS,
    TIMEOUT_SCRAPE_SECONDS,
)
from newsdesk.news.errors import EnrichmentFailure
from newsdesk.news.models import EnrichedContent
from newsdesk.news.normalize import absolute_url
from newsdesk.utils.timestamps import parse_timestamp_lenient

logger = logging.getLogger("news.enricher")

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

# Tried in order; the first selector yielding a usable paragraph wins.
CONTENT_SELECTORS = (
    "article p",
    '[data-component="ArticleBody"] p',
    ".article-body p",
    ".story-body p",
    ".content p",
    ".post-content p",
    ".entry-content p",
    ".story-content p",
    ".article-content p",
    ".story-body-text p",
    ".story-body__element p",
    ".in-depth-post-body p",
    ".l-container p",
    ".content__article-body p",
    ".ArticleBody-articleBody p",
    ".StandardArticleBody_body p",
)

BOILERPLATE_MARKERS = ("Read more", "Subscribe")

IMAGE_SELECTORS = (
    "article img",
    ".article-image img",
    ".story-image img",
    ".hero-image img",
    ".featured-image img",
    'meta[property="og:image"]',
    'meta[name="twitter:image"]',
)

DATE_SELECTORS = (
    'meta[property="article:published_time"]',
    'meta[name="pubdate"]',
    'meta[name="date"]',
    "time[datetime]",
    ".publish-date",
    ".article-date",
    ".story-date",
)

AUTHOR_SELECTORS = (
    'meta[name="author"]',
    'meta[property="article:author"]',
    ".author",
    ".byline",
    ".article-author",
    ".story-author",
    '[rel="author"]',
)

PageFactory = Callable[[], Any]


@asynccontextmanager
async def chromium_page(user_agent: str = BROWSER_USER_AGENT) -> AsyncIterator[Any]:
    """Launch headless Chromium and yield a fresh page; always closes the browser."""
    async with async_playwright() as p:
        browser = await p.chromium.launch(
            headless=True,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--disable-dev-shm-usage",
                "--no-sandbox",
            ],
        )
        try:
            context = await browser.new_context(
                viewport={"width": 1280, "height": 900},
                user_agent=user_agent,
            )
            yield await context.new_page()
        finally:
            await browser.close()


def _is_boilerplate(text: str) -> bool:
    return any(marker in text for marker in BOILERPLATE_MARKERS)


async def _attribute(page: Any, selector: str, names: tuple[str, ...]) -> Optional[str]:
    element = await page.query_selector(selector)
    if element is None:
        return None
    for name in names:
        value = await element.get_attribute(name)
        if value and value.strip():
            return value.strip()
    return None


async def _text(page: Any, selector: str) -> Optional[str]:
    element = await page.query_selector(selector)
    if element is None:
        return None
    value = await element.text_content()
    return value.strip() if value and value.strip() else None


class RenderedArticleScraper:
    """Single-article full-text extractor.

    Args:
        page_factory: Zero-argument callable returning an async context
            manager that yields a page. Defaults to ``chromium_page``.
        timeout: Whole-scrape budget in seconds.
        page_load_timeout_ms: Navigation timeout.
        settle_ms: Wait after navigation for client-side rendering.
    """

    def __init__(
        self,
        page_factory: Optional[PageFactory] = None,
        timeout: float = TIMEOUT_SCRAPE_SECONDS,
        page_load_timeout_ms: int = TIMEOUT_PAGE_LOAD_MS,
        settle_ms: int = PAGE_SETTLE_MS,
    ):
        self._page_factory = page_factory or chromium_page
        self.timeout = timeout
        self.page_load_timeout_ms = page_load_timeout_ms
        self.settle_ms = settle_ms

    async def scrape(self, url: str) -> EnrichedContent:
        """Render ``url`` and extract its article.

        Raises:
            EnrichmentFailure: Navigation failed, timed out or no content
                selector produced a usable paragraph.
        """
        start_time = time.time()
        try:
            result = await asyncio.wait_for(self._scrape(url), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise EnrichmentFailure(f"scrape timed out after {self.timeout}s") from e
        except PlaywrightError as e:
            raise EnrichmentFailure(f"browser error: {e}") from e

        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"SCRAPE_OK | {url} | chars:{len(result.content)} | "
            f"image:{bool(result.image_url)} | author:{bool(result.author)} | {duration_ms}ms"
        )
        return result

    async def _scrape(self, url: str) -> EnrichedContent:
        async with self._page_factory() as page:
            await page.goto(url, wait_until="domcontentloaded", timeout=self.page_load_timeout_ms)
            await page.wait_for_timeout(self.settle_ms)

            content = await self.extract_content(page)
            if not content:
                raise EnrichmentFailure("no content selector matched")

            return EnrichedContent(
                content=content,
                image_url=await self.extract_image(page),
                published_at=await self.extract_published_at(page),
                author=await self.extract_author(page),
            )

    async def extract_content(self, page: Any) -> Optional[str]:
        """Body text from the first selector with at least one real paragraph."""
        for selector in CONTENT_SELECTORS:
            try:
                elements = await page.query_selector_all(selector)
                texts = [await el.text_content() for el in elements]
            except PlaywrightError as e:
                logger.debug(f"SCRAPE_SELECTOR_ERROR | {selector} | {e}")
                continue

            paragraphs = [
                t.strip() for t in texts
                if t and len(t.strip()) > PARAGRAPH_MIN_LENGTH and not _is_boilerplate(t)
            ][:PARAGRAPH_MAX_COUNT]
            if paragraphs:
                return "\n\n".join(paragraphs)
        return None

    async def extract_image(self, page: Any) -> Optional[str]:
        for selector in IMAGE_SELECTORS:
            names = ("content",) if selector.startswith("meta") else ("src", "data-src", "data-lazy-src")
            try:
                value = await _attribute(page, selector, names)
            except PlaywrightError:
                continue
            resolved = absolute_url(value, base=page.url)
            if resolved:
                return resolved
        return None

    async def extract_published_at(self, page: Any) -> Optional[datetime]:
        for selector in DATE_SELECTORS:
            try:
                if selector.startswith("meta"):
                    value = await _attribute(page, selector, ("content",))
                elif selector == "time[datetime]":
                    value = await _attribute(page, selector, ("datetime",))
                else:
                    value = await _text(page, selector)
            except PlaywrightError:
                continue
            parsed = parse_timestamp_lenient(value)
            if parsed is not None:
                return parsed
        return None

    async def extract_author(self, page: Any) -> Optional[str]:
        for selector in AUTHOR_SELECTORS:
            try:
                if selector.startswith("meta"):
                    value = await _attribute(page, selector, ("content",))
                else:
                    value = await _text(page, selector)
            except PlaywrightError:
                continue
            if value and len(value) < AUTHOR_MAX_LENGTH:
                return value
        return None
