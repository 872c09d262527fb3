"""Tests for ContentEnricher and the rendered-page scraper."""

from contextlib import asynccontextmanager
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from newsdesk.news.enricher import PLACEHOLDER_ERROR, PLACEHOLDER_NO_CONTENT, ContentEnricher
from newsdesk.news.errors import EnrichmentFailure, InvalidRequestError
from newsdesk.news.sources.browser import RenderedArticleScraper, chromium_page

URL = "https://news.example.com/story"


class _PageSession:
    """Page factory that records how often its page context was entered and exited."""

    def __init__(self, page):
        self.page = page
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def __call__(self):
        self.opened += 1
        try:
            yield self.page
        finally:
            self.closed += 1


def _factory(page):
    return _PageSession(page)


class TestEnricher:
    """ContentEnricher.enrich."""

    @pytest.mark.asyncio
    async def test_no_matching_selectors_returns_placeholder(self, fake_page):
        FakePage, _ = fake_page
        enricher = ContentEnricher(RenderedArticleScraper(page_factory=_factory(FakePage(url=URL))))

        result = await enricher.enrich(URL)

        assert result.extracted is False
        assert result.content == PLACEHOLDER_NO_CONTENT.format(url=URL)
        assert result.to_dict() == {"content": result.content}

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_placeholder(self, fake_page):
        FakePage, _ = fake_page
        page = FakePage(url=URL, goto_error=OSError("connection reset"))
        session = _factory(page)
        enricher = ContentEnricher(RenderedArticleScraper(page_factory=session))

        result = await enricher.enrich(URL)

        assert result.content == PLACEHOLDER_ERROR.format(url=URL)
        assert "None" not in result.content
        assert session.opened == session.closed == 1

    @pytest.mark.asyncio
    async def test_scrape_timeout_returns_placeholder_and_closes_page(self, fake_page):
        FakePage, _ = fake_page
        session = _factory(FakePage(url=URL, goto_delay=1.0))
        enricher = ContentEnricher(RenderedArticleScraper(page_factory=session, timeout=0.05))

        result = await enricher.enrich(URL)

        assert result.extracted is False
        assert result.content == PLACEHOLDER_NO_CONTENT.format(url=URL)
        assert session.opened == session.closed == 1

    @pytest.mark.asyncio
    async def test_extracts_article(self, fake_page):
        FakePage, FakeElement = fake_page
        page = FakePage(url=URL, selectors={
            "article p": [
                FakeElement("The council approved the new transit plan on Tuesday evening."),
                FakeElement("Short."),
                FakeElement("Subscribe to our newsletter for more stories like this one."),
                FakeElement("Construction is expected to begin early next spring, officials said."),
            ],
            "article img": [FakeElement(attributes={"src": "/images/transit.jpg"})],
            'meta[property="article:published_time"]': [
                FakeElement(attributes={"content": "2025-03-04T10:00:00Z"}),
            ],
            ".byline": [FakeElement("Jane Reporter")],
        })
        enricher = ContentEnricher(RenderedArticleScraper(page_factory=_factory(page)))

        result = await enricher.enrich(URL)

        assert result.extracted is True
        assert result.content == (
            "The council approved the new transit plan on Tuesday evening.\n\n"
            "Construction is expected to begin early next spring, officials said."
        )
        assert result.image_url == "https://news.example.com/images/transit.jpg"
        assert result.published_at.isoformat() == "2025-03-04T10:00:00+00:00"
        assert result.author == "Jane Reporter"
        assert page.visited == [URL]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/file", "/relative/path"])
    async def test_invalid_url_is_rejected(self, url):
        enricher = ContentEnricher(RenderedArticleScraper(page_factory=lambda: None))

        with pytest.raises(InvalidRequestError):
            await enricher.enrich(url)


class TestScraper:
    """RenderedArticleScraper extraction rules."""

    @pytest.mark.asyncio
    async def test_falls_back_to_later_content_selector(self, fake_page):
        FakePage, FakeElement = fake_page
        page = FakePage(selectors={
            "article p": [FakeElement("tiny")],
            ".entry-content p": [FakeElement("A paragraph that is comfortably long enough to keep.")],
        })
        scraper = RenderedArticleScraper(page_factory=_factory(page))

        result = await scraper.scrape(page.url)

        assert result.content == "A paragraph that is comfortably long enough to keep."

    @pytest.mark.asyncio
    async def test_at_most_ten_paragraphs(self, fake_page):
        FakePage, FakeElement = fake_page
        paragraphs = [FakeElement(f"Paragraph number {i} with enough words to count.") for i in range(15)]
        page = FakePage(selectors={"article p": paragraphs})
        scraper = RenderedArticleScraper(page_factory=_factory(page))

        result = await scraper.scrape(page.url)

        assert len(result.content.split("\n\n")) == 10

    @pytest.mark.asyncio
    async def test_published_at_from_time_element(self, fake_page):
        FakePage, FakeElement = fake_page
        page = FakePage(selectors={
            "time[datetime]": [FakeElement(attributes={"datetime": "2025-03-04T10:00:00Z"})],
        })
        scraper = RenderedArticleScraper(page_factory=_factory(page))

        published = await scraper.extract_published_at(page)

        assert isinstance(published, datetime)
        assert published.isoformat() == "2025-03-04T10:00:00+00:00"

    @pytest.mark.asyncio
    async def test_published_at_none_without_dates(self, fake_page):
        FakePage, _ = fake_page
        scraper = RenderedArticleScraper(page_factory=_factory(FakePage()))

        assert await scraper.extract_published_at(FakePage()) is None

    @pytest.mark.asyncio
    async def test_empty_page_raises_enrichment_failure(self, fake_page):
        FakePage, _ = fake_page
        session = _factory(FakePage())
        scraper = RenderedArticleScraper(page_factory=session)

        with pytest.raises(EnrichmentFailure):
            await scraper.scrape("https://news.example.com/empty")
        assert session.closed == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_enrichment_failure(self, fake_page):
        FakePage, _ = fake_page
        session = _factory(FakePage(goto_delay=1.0))
        scraper = RenderedArticleScraper(page_factory=session, timeout=0.05)

        with pytest.raises(EnrichmentFailure, match="timed out"):
            await scraper.scrape("https://news.example.com/slow")
        assert session.closed == 1

    @pytest.mark.asyncio
    async def test_long_author_is_ignored(self, fake_page):
        FakePage, FakeElement = fake_page
        page = FakePage(selectors={".author": [FakeElement("x" * 150)]})
        scraper = RenderedArticleScraper(page_factory=_factory(page))

        assert await scraper.extract_author(page) is None

    @pytest.mark.asyncio
    async def test_meta_image_fallback(self, fake_page):
        FakePage, FakeElement = fake_page
        page = FakePage(selectors={
            'meta[property="og:image"]': [FakeElement(attributes={"content": "https://cdn.example.com/a.jpg"})],
        })
        scraper = RenderedArticleScraper(page_factory=_factory(page))

        assert await scraper.extract_image(page) == "https://cdn.example.com/a.jpg"


class TestChromiumPage:
    """Browser lifetime of the default page factory."""

    @staticmethod
    def _fake_playwright():
        page = MagicMock(name="page")
        context = MagicMock()
        context.new_page = AsyncMock(return_value=page)
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)
        browser.close = AsyncMock()
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(return_value=browser)
        manager = MagicMock()
        manager.__aenter__ = AsyncMock(return_value=playwright)
        manager.__aexit__ = AsyncMock(return_value=False)
        return manager, browser, page

    @pytest.mark.asyncio
    async def test_browser_closed_after_use(self):
        manager, browser, page = self._fake_playwright()

        with patch("newsdesk.news.sources.browser.async_playwright", return_value=manager):
            async with chromium_page() as opened:
                assert opened is page

        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_browser_closed_when_body_raises(self):
        manager, browser, _ = self._fake_playwright()

        with patch("newsdesk.news.sources.browser.async_playwright", return_value=manager):
            with pytest.raises(RuntimeError):
                async with chromium_page():
                    raise RuntimeError("navigation blew up")

        browser.close.assert_awaited_once()
