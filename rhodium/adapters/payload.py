"""Typed accessors with explicit defaults for loosely-typed webhook payloads.

Provider payloads change shape across webhook versions, so every field read
during normalization goes through one of these helpers. A missing key, a
``null``, or a value of the wrong type yields the accessor's default instead
of an exception, which keeps one malformed field from aborting the rest of an
event.

Examples
--------
>>> payload = {"repository": {"owner": {"login": "octo"}, "stars": "many"}}
>>> str_at(payload, "repository", "owner", "login")
'octo'
>>> int_at(payload, "repository", "stars")
0
>>> opt_str_at(payload, "repository", "description") is None
True

"""

from __future__ import annotations

import typing as typ

import msgspec

from rhodium.adapters.errors import PayloadDecodeError

Payload: typ.TypeAlias = dict[str, typ.Any]


def decode_object(payload: bytes) -> Payload:
    """Decode a JSON body, requiring a top-level object.

    Raises
    ------
    PayloadDecodeError
        If the body is not valid JSON or its top level is not an object.

    """
    try:
        data = msgspec.json.decode(payload)
    except msgspec.DecodeError as exc:
        raise PayloadDecodeError.invalid_json(str(exc)) from exc
    if not isinstance(data, dict):
        raise PayloadDecodeError.not_an_object(type(data).__name__)
    return typ.cast("Payload", data)


def value_at(data: object, *keys: str) -> object:
    """Traverse nested mappings, returning ``None`` once a step is missing."""
    current: object = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = typ.cast("Payload", current).get(key)
    return current


def str_at(data: object, *keys: str, default: str = "") -> str:
    """Return the string at ``keys`` or ``default``."""
    value = value_at(data, *keys)
    return value if isinstance(value, str) else default


def opt_str_at(data: object, *keys: str) -> str | None:
    """Return the string at ``keys`` or ``None``."""
    value = value_at(data, *keys)
    return value if isinstance(value, str) else None


def _is_int(value: object) -> typ.TypeGuard[int]:
    # bool is an int subclass; JSON true must not read as 1.
    return isinstance(value, int) and not isinstance(value, bool)


def int_at(data: object, *keys: str, default: int = 0) -> int:
    """Return the integer at ``keys`` or ``default``."""
    value = value_at(data, *keys)
    return value if _is_int(value) else default


def opt_int_at(data: object, *keys: str) -> int | None:
    """Return the integer at ``keys`` or ``None``."""
    value = value_at(data, *keys)
    return value if _is_int(value) else None


def bool_at(data: object, *keys: str, default: bool = False) -> bool:
    """Return the boolean at ``keys`` or ``default``."""
    value = value_at(data, *keys)
    return value if isinstance(value, bool) else default


def id_at(data: object, *keys: str) -> str:
    """Return an identifier rendered as a string.

    Numeric ids become their decimal form and string ids pass through;
    anything else yields ``""``.
    """
    value = value_at(data, *keys)
    if _is_int(value):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


def object_at(data: object, *keys: str) -> Payload | None:
    """Return the mapping at ``keys`` or ``None`` when absent or not a mapping."""
    value = value_at(data, *keys)
    return typ.cast("Payload", value) if isinstance(value, dict) else None


def has_object(data: object, *keys: str) -> bool:
    """Return ``True`` when a mapping is present at ``keys``."""
    return object_at(data, *keys) is not None


def objects_at(data: object, *keys: str) -> list[Payload]:
    """Return the mappings in the list at ``keys``, skipping other entries."""
    value = value_at(data, *keys)
    if not isinstance(value, list):
        return []
    return [typ.cast("Payload", item) for item in value if isinstance(item, dict)]


def strs_at(data: object, *keys: str) -> tuple[str, ...]:
    """Return the strings in the list at ``keys``, skipping other entries."""
    value = value_at(data, *keys)
    if not isinstance(value, list):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def names_at(data: object, *keys: str) -> tuple[str, ...]:
    """Return the ``name`` of each mapping in the list at ``keys``.

    Used for label lists such as ``[{"name": "bug"}, {"name": "docs"}]``.
    """
    names: list[str] = []
    for item in objects_at(data, *keys):
        name = item.get("name")
        if isinstance(name, str):
            names.append(name)
    return tuple(names)


def first_object(data: object, *candidates: str) -> Payload | None:
    """Return the first mapping found among ``candidates`` top-level keys."""
    for key in candidates:
        found = object_at(data, key)
        if found is not None:
            return found
    return None


__all__ = [
    "Payload",
    "bool_at",
    "decode_object",
    "first_object",
    "has_object",
    "id_at",
    "int_at",
    "names_at",
    "object_at",
    "objects_at",
    "opt_int_at",
    "opt_str_at",
    "str_at",
    "strs_at",
    "value_at",
]
