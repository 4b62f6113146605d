"""Unit tests for repository slug and key helpers."""

from __future__ import annotations

import datetime as dt

import pytest

from rhodium.common.slug import platform_repo_key, repo_slug
from rhodium.common.time import parse_rfc3339, utcnow


def test_repo_slug_combines_owner_and_name() -> None:
    """repo_slug returns owner/name format."""
    assert repo_slug("octo", "reef") == "octo/reef", "Expected owner/name slug."


def test_platform_repo_key_prefixes_platform() -> None:
    """Keys used by the cache and graph carry the platform identifier."""
    assert platform_repo_key("github", "octo", "reef") == "github:octo/reef", (
        "Expected platform:owner/name key."
    )


def test_utcnow_is_timezone_aware() -> None:
    """utcnow returns an aware UTC timestamp."""
    assert utcnow().tzinfo is dt.UTC, "Expected UTC tzinfo."


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-05-01T12:00:00Z", dt.datetime(2024, 5, 1, 12, tzinfo=dt.UTC)),
        (
            "2024-05-01T14:00:00+02:00",
            dt.datetime(2024, 5, 1, 12, tzinfo=dt.UTC),
        ),
        ("2024-05-01T12:00:00", None),
        ("not a date", None),
        ("", None),
        (1714564800, None),
        (None, None),
    ],
)
def test_parse_rfc3339(raw: object, expected: dt.datetime | None) -> None:
    """Only offset-bearing RFC 3339 strings parse."""
    assert parse_rfc3339(raw) == expected, f"Unexpected parse for {raw!r}."
