"""Timestamp utilities for consistent timezone handling.

All internal timestamps are stored and compared as aware UTC datetimes.
Provider payloads arrive in several formats (ISO 8601 with or without
offset, RFC 2822, unix epoch seconds); everything funnels through
``parse_timestamp`` so the rest of the pipeline never sees a naive value.

Usage:
    from newsdesk.utils.timestamps import (
        now_utc,
        to_utc,
        parse_timestamp,
        parse_timestamp_lenient,
        from_unix,
        clamp_to_now,
        format_timestamp,
        format_local,
    )

    published = parse_timestamp("2025-12-17T15:20:21Z")
    published = clamp_to_now(published)  # never in the future
"""

from __future__ import annotations

import email.utils
import re
from datetime import datetime, timezone
from typing import Optional


# =============================================================================
# CURRENT TIME
# =============================================================================

def now_utc() -> datetime:
    """Get current time in UTC with timezone info.

    Returns:
        Current UTC datetime with tzinfo.
    """
    return datetime.now(timezone.utc)


# =============================================================================
# TIMEZONE CONVERSION
# =============================================================================

def to_utc(dt: datetime) -> datetime:
    """Convert any datetime to UTC.

    Naive datetimes are assumed to already be UTC; news providers report
    UTC when they omit an offset.

    Args:
        dt: Datetime to convert (with or without tzinfo).

    Returns:
        Datetime in UTC with tzinfo.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_unix(seconds: float) -> datetime:
    """Convert epoch seconds to an aware UTC datetime."""
    return datetime.fromtimestamp(float(seconds), tz=timezone.utc)


def clamp_to_now(dt: datetime, now: Optional[datetime] = None) -> datetime:
    """Clamp a timestamp so it never lies in the future.

    Args:
        dt: Timestamp to clamp.
        now: Reference time (defaults to current UTC time).

    Returns:
        ``dt`` in UTC, or ``now`` if ``dt`` is later than it.
    """
    now = to_utc(now) if now else now_utc()
    dt = to_utc(dt)
    return now if dt > now else dt


# =============================================================================
# PARSING
# =============================================================================

_ISO_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}[T ]")

_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y/%m/%d %H:%M:%S",
    "%Y-%m-%d",
)


def parse_timestamp(s: str) -> datetime:
    """Parse a timestamp string to an aware UTC datetime.

    Handles multiple formats:
    - ISO 8601: "2025-12-17T15:20:21+0000"
    - ISO 8601 with Z: "2025-12-17T15:20:21Z"
    - Naive ISO: "2025-12-17T15:20:21" (assumed UTC)
    - RFC 2822: "Wed, 17 Dec 2025 15:20:21 GMT"
    - Date only: "2025-12-17"

    Args:
        s: Timestamp string to parse.

    Returns:
        Datetime in UTC with tzinfo.

    Raises:
        ValueError: If string cannot be parsed.
    """
    if not s or not s.strip():
        raise ValueError("Empty timestamp string")

    s = s.strip()

    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    # +0000 -> +00:00
    tz_match = re.search(r"([+-])(\d{2})(\d{2})$", s)
    if tz_match and _ISO_PREFIX.match(s):
        sign, hours, minutes = tz_match.groups()
        s = s[:-5] + f"{sign}{hours}:{minutes}"

    try:
        return to_utc(datetime.fromisoformat(s))
    except ValueError:
        pass

    try:
        return to_utc(email.utils.parsedate_to_datetime(s))
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return to_utc(datetime.strptime(s, fmt))
        except ValueError:
            continue

    raise ValueError(f"Cannot parse timestamp: {s}")


def parse_timestamp_lenient(
    value: object,
    default: Optional[datetime] = None,
) -> Optional[datetime]:
    """Parse a timestamp, returning default on failure instead of raising.

    Accepts strings, datetimes and epoch numbers.

    Args:
        value: Raw timestamp value from a payload.
        default: Value to return if parsing fails.

    Returns:
        Parsed datetime in UTC, or default if parsing failed.
    """
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return from_unix(value)
        except (OverflowError, OSError, ValueError):
            return default
    if isinstance(value, str):
        try:
            return parse_timestamp(value)
        except ValueError:
            return default
    return default


# =============================================================================
# FORMATTING
# =============================================================================

def format_timestamp(dt: datetime) -> str:
    """Format datetime as ISO 8601 string in UTC.

    Use this for JSON storage and API-shaped responses.

    Returns:
        ISO 8601 string like "2025-12-17T15:20:21+00:00".
    """
    return to_utc(dt).isoformat()


def format_local(dt: datetime) -> str:
    """Format datetime for human-readable display in local time.

    Returns:
        Formatted string like "Dec 17, 2025 12:43 PM".
    """
    return to_utc(dt).astimezone().strftime("%b %d, %Y %I:%M %p")
