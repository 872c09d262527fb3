"""Utility modules for Newsdesk."""

from .timestamps import (
    now_utc,
    to_utc,
    from_unix,
    clamp_to_now,
    parse_timestamp,
    parse_timestamp_lenient,
    format_timestamp,
    format_local,
)

__all__ = [
    "now_utc",
    "to_utc",
    "from_unix",
    "clamp_to_now",
    "parse_timestamp",
    "parse_timestamp_lenient",
    "format_timestamp",
    "format_local",
]
