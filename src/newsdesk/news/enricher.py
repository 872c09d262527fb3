"""On-demand full-text extraction for a single article.

Invoked lazily when a reader asks for the full story; bulk ingestion only
uses provider summaries. Extraction problems never raise: the caller gets
a placeholder that points back to the original article. Only a malformed
URL is rejected, since that is a caller error.
"""

from __future__ import annotations

import logging
from typing import Optional

from newsdesk.news.errors import EnrichmentFailure, InvalidRequestError
from newsdesk.news.models import EnrichedContent
from newsdesk.news.normalize import is_absolute_url
from newsdesk.news.sources.browser import RenderedArticleScraper

logger = logging.getLogger("news.enricher")

PLACEHOLDER_NO_CONTENT = (
    "Unable to extract full content. Please visit the original article: {url}"
)
PLACEHOLDER_ERROR = (
    "Unable to extract full content due to an error. Please visit the original article: {url}"
)


class ContentEnricher:
    """Full-text lookup backed by the render-and-extract scraper."""

    def __init__(self, scraper: Optional[RenderedArticleScraper] = None):
        self.scraper = scraper or RenderedArticleScraper()

    async def enrich(self, url: str) -> EnrichedContent:
        """Extract the article at ``url``.

        Raises:
            InvalidRequestError: ``url`` is not an absolute http(s) URL.
        """
        if not is_absolute_url(url):
            raise InvalidRequestError(f"Invalid article URL: {url!r}")
        url = url.strip()

        try:
            return await self.scraper.scrape(url)
        except EnrichmentFailure as e:
            logger.warning(f"ENRICH_EMPTY | {url} | {e}")
            return EnrichedContent(content=PLACEHOLDER_NO_CONTENT.format(url=url), extracted=False)
        except Exception as e:
            logger.error(f"ENRICH_FAILED | {url} | {type(e).__name__}: {e}")
            return EnrichedContent(content=PLACEHOLDER_ERROR.format(url=url), extracted=False)
