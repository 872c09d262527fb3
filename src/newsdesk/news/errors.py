"""Exception types for the ingestion pipeline.

Only ``InvalidRequestError`` ever reaches callers. The other types are
raised inside adapters and the scraper and recovered at their boundary.
"""

from __future__ import annotations


class NewsdeskError(Exception):
    """Base class for pipeline errors."""


class SourceUnavailable(NewsdeskError):
    """A provider call failed, timed out or returned a malformed payload."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


class EnrichmentFailure(NewsdeskError):
    """The full-text extractor could not produce usable content."""


class InvalidRequestError(NewsdeskError, ValueError):
    """Caller supplied invalid input (bad URL, page, page size or query)."""
