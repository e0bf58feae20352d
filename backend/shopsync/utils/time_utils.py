"""
PURPOSE: Time utilities for webhook processing.
Provides the UTC clock used for defaulted timestamps and refresh freshness checks.
"""

from datetime import datetime, timezone
from typing import Any, Optional


def get_utc_now() -> datetime:
    """
    PURPOSE: Return the current UTC time as a timezone-aware datetime object.

    Returns:
        datetime: Current UTC time with timezone info.
    """
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    PURPOSE: Parse a Shopify ISO-8601 timestamp into an aware datetime.

    Shopify sends offsets such as "2024-03-01T10:15:00-05:00"; a trailing
    "Z" is also accepted. Naive values are assumed to be UTC.

    Args:
        value: Timestamp string, datetime, or None.

    Returns:
        Optional[datetime]: Parsed aware datetime, or None if absent or unparseable.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def seconds_since(moment: datetime, now: Optional[datetime] = None) -> float:
    """
    PURPOSE: Return the number of seconds elapsed since a given moment.

    Args:
        moment: Aware datetime in the past.
        now: Reference time (default: current UTC time).

    Returns:
        float: Elapsed seconds (negative if moment is in the future).
    """
    reference = now or get_utc_now()
    return (reference - moment).total_seconds()
