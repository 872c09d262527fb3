"""Global constants package for Newsdesk.

Import from here for consistency:

    from newsdesk.constants import WINDOW_FRESH_MINUTES, PAGE_SIZE_DEFAULT
"""

from .limits import (
    # Windows
    WINDOW_FRESH_MINUTES,
    WINDOW_RETENTION_DAYS,
    WINDOW_SCRAPE_STALENESS_HOURS,
    WINDOW_LATEST_HOURS,
    # Timeouts
    TIMEOUT_SOURCE_SECONDS,
    TIMEOUT_PAGE_LOAD_MS,
    TIMEOUT_SCRAPE_SECONDS,
    PAGE_SETTLE_MS,
    # Content
    SUMMARY_FALLBACK_LENGTH,
    CONTENT_MAX_LENGTH,
    CONTENT_PREVIEW_LENGTH,
    COMMUNITY_EXCERPT_LENGTH,
    DEDUP_TITLE_PREFIX_LENGTH,
    PARAGRAPH_MIN_LENGTH,
    PARAGRAPH_MAX_COUNT,
    AUTHOR_MAX_LENGTH,
    CHAT_CONTENT_MAX_LENGTH,
    # Pagination
    PAGE_SIZE_DEFAULT,
    PAGE_SIZE_MAX,
    BREAKING_LIMIT_DEFAULT,
    BREAKING_LIMIT_MAX,
    BREAKING_RESULTS_PER_KEYWORD,
    COMMUNITY_FEEDS_PER_CATEGORY,
)

__all__ = [
    "WINDOW_FRESH_MINUTES",
    "WINDOW_RETENTION_DAYS",
    "WINDOW_SCRAPE_STALENESS_HOURS",
    "WINDOW_LATEST_HOURS",
    "TIMEOUT_SOURCE_SECONDS",
    "TIMEOUT_PAGE_LOAD_MS",
    "TIMEOUT_SCRAPE_SECONDS",
    "PAGE_SETTLE_MS",
    "SUMMARY_FALLBACK_LENGTH",
    "CONTENT_MAX_LENGTH",
    "CONTENT_PREVIEW_LENGTH",
    "COMMUNITY_EXCERPT_LENGTH",
    "DEDUP_TITLE_PREFIX_LENGTH",
    "PARAGRAPH_MIN_LENGTH",
    "PARAGRAPH_MAX_COUNT",
    "AUTHOR_MAX_LENGTH",
    "CHAT_CONTENT_MAX_LENGTH",
    "PAGE_SIZE_DEFAULT",
    "PAGE_SIZE_MAX",
    "BREAKING_LIMIT_DEFAULT",
    "BREAKING_LIMIT_MAX",
    "BREAKING_RESULTS_PER_KEYWORD",
    "COMMUNITY_FEEDS_PER_CATEGORY",
]
