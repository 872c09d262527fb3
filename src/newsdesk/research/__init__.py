"""Web research helpers for the news assistant."""

from .web_search import WebSearcher, WebSearchResponse, WebSearchResult, clean_query

__all__ = [
    "WebSearcher",
    "WebSearchResponse",
    "WebSearchResult",
    "clean_query",
]
