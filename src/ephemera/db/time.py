# src/ephemera/db/time.py
"""Time utilities for database models and the expiry timestamp source."""

from datetime import UTC, datetime

from ephemera.core.settings import settings


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def now_ms() -> int:
    """Return network-adjusted wall-clock time in epoch milliseconds."""
    return int(utcnow().timestamp() * 1000) + settings.clock_offset_ms
