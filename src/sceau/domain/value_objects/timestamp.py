"""
Timestamp helpers for sign-in challenges.

Challenges carry UTC instants with millisecond precision. The same
formatter is used on the wire and inside the canonical message, so a
server-issued challenge survives a JSON round trip byte-for-byte.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds."""
    return to_utc_millis(datetime.now(timezone.utc))


def to_utc_millis(value: datetime) -> datetime:
    """
    Normalize datetime to timezone-aware UTC with millisecond precision.

    Naive datetimes are interpreted as UTC.

    Args:
        value: Datetime to normalize

    Returns:
        Aware UTC datetime with microseconds truncated to milliseconds
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """
    Format datetime as ISO-8601 with milliseconds and 'Z' suffix.

    Example:
        2024-04-11T05:46:45.457Z
    """
    value = to_utc_millis(value)
    return (
        value.strftime("%Y-%m-%dT%H:%M:%S")
        + f".{value.microsecond // 1000:03d}Z"
    )
