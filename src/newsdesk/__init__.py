"""Newsdesk - multi-source news ingestion, deduplication and caching."""

__version__ = "0.1.0"
