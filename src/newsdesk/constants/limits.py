"""Limit constants for Newsdesk.

This module contains all limits and constraints:
- Freshness and retention windows
- Provider request timeouts
- Content length limits
- Pagination bounds

MODIFICATION GUIDE:
------------------
- WINDOW_* values: cache behaviour depends on these; they are the defaults
  for the matching settings in providers/config.py
- TIMEOUT_* settings: every outbound call must stay bounded
- CONTENT_* limits: applied when normalizing provider payloads
"""

from typing import Final

# =============================================================================
# FRESHNESS AND RETENTION WINDOWS
# =============================================================================

WINDOW_FRESH_MINUTES: Final[int] = 60
"""Cached rows scraped within this window are served without refetching."""

WINDOW_RETENTION_DAYS: Final[int] = 2
"""Articles published longer ago than this are dropped from listings and purges."""

WINDOW_SCRAPE_STALENESS_HOURS: Final[int] = 24
"""Rows not re-ingested within this window are purged on a forced refresh."""

WINDOW_LATEST_HOURS: Final[int] = 24
"""Time window for the broad 'latest news' query when no category is given."""


# =============================================================================
# TIMEOUTS
# =============================================================================

TIMEOUT_SOURCE_SECONDS: Final[float] = 10.0
"""Per-call timeout for provider API requests."""

TIMEOUT_PAGE_LOAD_MS: Final[int] = 15000
"""Navigation timeout for the headless browser."""

TIMEOUT_SCRAPE_SECONDS: Final[float] = 30.0
"""Overall budget for one render-and-extract call, browser start included."""

PAGE_SETTLE_MS: Final[int] = 2000
"""Wait after navigation so late-loading content can render."""


# =============================================================================
# CONTENT LIMITS
# =============================================================================

SUMMARY_FALLBACK_LENGTH: Final[int] = 300
"""Characters of content used as summary when a provider has no description."""

CONTENT_MAX_LENGTH: Final[int] = 4000
"""Maximum stored body length for provider-supplied content."""

CONTENT_PREVIEW_LENGTH: Final[int] = 500
"""Body preview length for providers that return the full article text."""

COMMUNITY_EXCERPT_LENGTH: Final[int] = 200
"""Summary length for community-link excerpts."""

DEDUP_TITLE_PREFIX_LENGTH: Final[int] = 50
"""Title prefix length compared when detecting duplicate stories."""

PARAGRAPH_MIN_LENGTH: Final[int] = 20
"""Minimum paragraph length kept by the article extractor."""

PARAGRAPH_MAX_COUNT: Final[int] = 10
"""Maximum paragraphs joined into enriched content."""

AUTHOR_MAX_LENGTH: Final[int] = 100
"""Author strings at or over this length are treated as page noise."""

CHAT_CONTENT_MAX_LENGTH: Final[int] = 1500
"""Content characters per article in the chat context block."""


# =============================================================================
# PAGINATION AND BOOST LIMITS
# =============================================================================

PAGE_SIZE_DEFAULT: Final[int] = 20
"""Default number of articles per page."""

PAGE_SIZE_MAX: Final[int] = 100
"""Largest page size a caller may request."""

BREAKING_LIMIT_DEFAULT: Final[int] = 5
"""Breaking-news articles prepended to a listing by default."""

BREAKING_LIMIT_MAX: Final[int] = 10
"""Hard cap on breaking-news articles so they cannot dominate a page."""

BREAKING_RESULTS_PER_KEYWORD: Final[int] = 5
"""Search results requested per urgency keyword."""

COMMUNITY_FEEDS_PER_CATEGORY: Final[int] = 2
"""Community feeds consulted per category."""
