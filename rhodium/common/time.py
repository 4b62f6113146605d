"""Common time utilities."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp suitable for DB defaults."""
    return dt.datetime.now(dt.UTC)


def parse_rfc3339(value: object) -> dt.datetime | None:
    """Parse an RFC 3339 timestamp into an aware UTC datetime.

    Provider payloads use ``Z`` suffixed timestamps such as
    ``2024-05-01T12:00:00Z``. Anything that is not a string, does not parse,
    or lacks an offset yields ``None``.

    Examples
    --------
    >>> parse_rfc3339("2024-05-01T12:00:00Z").isoformat()
    '2024-05-01T12:00:00+00:00'
    >>> parse_rfc3339("yesterday") is None
    True

    """
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = dt.datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone(dt.UTC)
