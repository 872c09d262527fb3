"""Command-line interface for newsdesk.

- core/: Shared console and Result types
- news/: Headline, refresh, enrichment, chat and store maintenance commands

Usage:
    python -m newsdesk.cli --help
    python -m newsdesk.cli headlines --category sports
"""

from .app import app, main

__all__ = ["app", "main"]
