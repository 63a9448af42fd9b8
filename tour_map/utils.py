"""General utility helpers shared across modules."""

from __future__ import annotations

import re
from datetime import datetime, timezone

# Serialised form of "no timestamp" in API responses.
ZERO_TIME_RFC3339 = "0001-01-01T00:00:00Z"

_RFC3339_RE = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})$"
)


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC3339 timestamp into a timezone-aware datetime.

    Fractional seconds of any precision are accepted and truncated to
    microseconds. A missing offset is rejected.

    Raises:
        ValueError: If ``value`` is not a valid RFC3339 timestamp.
    """

    match = _RFC3339_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"not an RFC3339 timestamp: {value!r}")
    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    if offset == "Z":
        offset = "+00:00"
    return datetime.fromisoformat(f"{match.group('base')}.{fraction}{offset}")


def format_rfc3339(value: datetime | None) -> str:
    """Format a datetime as RFC3339, using ``Z`` for UTC."""

    if value is None:
        return ZERO_TIME_RFC3339
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.isoformat()
    if text.endswith("+00:00"):
        text = text[:-6] + "Z"
    return text


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (FIT files store UTC without an offset)."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
