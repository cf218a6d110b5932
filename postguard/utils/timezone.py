"""
Timezone Utilities.

All timestamps (audit events, post created/updated times) are stored and
returned as timezone-aware UTC.
"""

from datetime import datetime, timezone

# UTC constant
UTC = timezone.utc


def utc_now() -> datetime:
    """
    Get current time in UTC (timezone-aware).

    Always use this instead of datetime.utcnow() which returns
    naive datetime.
    """
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert datetime to UTC, treating naive values as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_iso8601(dt: datetime) -> str:
    """
    Format as ISO 8601 with Z suffix.

    Usage:
        iso = to_iso8601(event.timestamp)
        # "2024-01-15T14:30:00Z"
    """
    return to_utc(dt).strftime("%Y-%m-%dT%H:%M:%SZ")
