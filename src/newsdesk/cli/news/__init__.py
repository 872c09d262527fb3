"""News feature - headline, enrichment, chat and store commands."""

from .commands import (
    ask,
    clear,
    enrich,
    headlines,
    pin,
    purge,
    refresh,
    sources,
    top_stories,
    unpin,
)

__all__ = [
    "headlines",
    "refresh",
    "top_stories",
    "enrich",
    "ask",
    "sources",
    "purge",
    "clear",
    "pin",
    "unpin",
]
