"""Data formatting utilities."""

import re
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

# Jira sends offsets without a colon, e.g. 2019-03-01T09:30:00.000-0800
_COMPACT_OFFSET = re.compile(r'([+-]\d{2})(\d{2})$')


def parse_jira_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a Jira timestamp into an aware datetime.

    Args:
        value: Timestamp string as returned by the Jira REST API

    Returns:
        Aware datetime (naive values are taken as UTC), or None when
        missing or unparseable
    """
    if not value:
        return None
    text = _COMPACT_OFFSET.sub(r'\1:\2', value.strip().replace('Z', '+00:00'))
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_datetime(dt: Optional[datetime], tz_name: str) -> Optional[str]:
    """Format datetime as ISO string in the given named time zone.

    Args:
        dt: Datetime to format
        tz_name: IANA time zone name (e.g. America/Los_Angeles)

    Returns:
        ISO string with offset at second precision, or None
    """
    if dt is None:
        return None
    return dt.astimezone(ZoneInfo(tz_name)).isoformat(timespec='seconds')


def clamp_estimate(value, maximum: int = 8) -> int:
    """Clamp a story point estimate to an integer in [0, maximum].

    Missing, zero and other falsy values all become 0.
    """
    try:
        return max(0, int(min(value or 0, maximum)))
    except (TypeError, ValueError):
        return 0
