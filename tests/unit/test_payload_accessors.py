"""Unit tests for the tolerant payload accessors."""

from __future__ import annotations

import pytest

from rhodium.adapters.errors import PayloadDecodeError
from rhodium.adapters.payload import (
    bool_at,
    decode_object,
    first_object,
    has_object,
    id_at,
    int_at,
    names_at,
    object_at,
    objects_at,
    opt_int_at,
    opt_str_at,
    str_at,
    strs_at,
    value_at,
)

_DATA = {
    "repository": {"name": "reef", "owner": {"login": "octo", "id": 9}},
    "count": 3,
    "flag": True,
    "text_id": "MDQ6VXNlcjE=",
    "nothing": None,
    "labels": [{"name": "bug"}, "stray", {"name": 5}, {"name": "docs"}],
    "files": ["a.py", 1, "b.py"],
    "alert": {"severity": "high"},
}


class TestDecodeObject:
    """Tests for decode_object."""

    def test_decodes_object(self) -> None:
        """A JSON object decodes to a dict."""
        assert decode_object(b'{"a": 1}') == {"a": 1}, "Expected decoded mapping."

    def test_rejects_invalid_json(self) -> None:
        """Invalid JSON raises PayloadDecodeError."""
        with pytest.raises(PayloadDecodeError, match="not valid JSON"):
            decode_object(b"{nope")

    @pytest.mark.parametrize("body", [b"[]", b'"text"', b"42", b"null"])
    def test_rejects_non_object(self, body: bytes) -> None:
        """Top-level values other than objects are rejected."""
        with pytest.raises(PayloadDecodeError, match="must be a JSON object"):
            decode_object(body)


def test_value_at_traverses_and_stops_at_non_mapping() -> None:
    """value_at walks mappings and yields None past a leaf."""
    assert value_at(_DATA, "repository", "owner", "login") == "octo"
    assert value_at(_DATA, "count", "deeper") is None, "Leaf cannot be indexed."
    assert value_at(_DATA, "missing") is None, "Missing keys yield None."


@pytest.mark.parametrize(
    ("keys", "expected"),
    [
        (("repository", "name"), "reef"),
        (("count",), ""),
        (("nothing",), ""),
        (("missing",), ""),
    ],
)
def test_str_at_defaults(keys: tuple[str, ...], expected: str) -> None:
    """Non-string values fall back to the empty string."""
    assert str_at(_DATA, *keys) == expected, f"Unexpected str_at for {keys}."


def test_str_at_custom_default() -> None:
    """A custom default is honoured."""
    assert str_at(_DATA, "missing", default="main") == "main"


def test_opt_str_at_returns_none_for_null() -> None:
    """JSON null reads as None."""
    assert opt_str_at(_DATA, "nothing") is None
    assert opt_str_at(_DATA, "text_id") == "MDQ6VXNlcjE="


def test_int_accessors_reject_booleans() -> None:
    """JSON booleans never read as integers."""
    assert int_at(_DATA, "flag") == 0, "True must not read as 1."
    assert opt_int_at(_DATA, "flag") is None, "True must not read as 1."
    assert int_at(_DATA, "count") == 3
    assert opt_int_at(_DATA, "count") == 3


def test_bool_at_requires_boolean() -> None:
    """Only real booleans are returned."""
    assert bool_at(_DATA, "flag") is True
    assert bool_at(_DATA, "count") is False, "Integers are not booleans."
    assert bool_at(_DATA, "missing", default=True) is True


@pytest.mark.parametrize(
    ("keys", "expected"),
    [
        (("repository", "owner", "id"), "9"),
        (("text_id",), "MDQ6VXNlcjE="),
        (("flag",), ""),
        (("missing",), ""),
    ],
)
def test_id_at_renders_identifiers(keys: tuple[str, ...], expected: str) -> None:
    """Numeric and string ids become strings; other values become empty."""
    assert id_at(_DATA, *keys) == expected, f"Unexpected id for {keys}."


def test_object_accessors() -> None:
    """Mapping lookups distinguish objects from other values."""
    assert object_at(_DATA, "alert") == {"severity": "high"}
    assert object_at(_DATA, "count") is None
    assert has_object(_DATA, "repository", "owner") is True
    assert has_object(_DATA, "nothing") is False


def test_list_accessors_skip_foreign_entries() -> None:
    """List accessors keep only entries of the expected shape."""
    assert objects_at(_DATA, "labels") == [
        {"name": "bug"},
        {"name": 5},
        {"name": "docs"},
    ]
    assert names_at(_DATA, "labels") == ("bug", "docs")
    assert strs_at(_DATA, "files") == ("a.py", "b.py")
    assert strs_at(_DATA, "count") == (), "Non-lists yield an empty tuple."
    assert objects_at(_DATA, "missing") == []


def test_first_object_picks_first_present_candidate() -> None:
    """Candidates are tried in order."""
    assert first_object(_DATA, "security_advisory", "alert") == {"severity": "high"}
    assert first_object(_DATA, "security_advisory") is None
