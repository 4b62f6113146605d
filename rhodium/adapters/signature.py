"""HMAC-SHA256 webhook signature helpers."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_PREFIX = "sha256="


def compute_signature(secret: str, payload: bytes) -> str:
    """Return the hex HMAC-SHA256 digest of ``payload`` keyed by ``secret``.

    The digest covers the raw request body. Re-serialising a parsed body
    changes its bytes and therefore the digest.
    """
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def signature_header_value(secret: str, payload: bytes) -> str:
    """Return the full header value (``sha256=<hex>``) for ``payload``."""
    return f"{SIGNATURE_PREFIX}{compute_signature(secret, payload)}"


def constant_time_equals(left: bytes, right: bytes) -> bool:
    """Compare two byte strings without exiting early on a mismatch.

    Lengths are compared first; equal-length inputs are then XOR-accumulated
    across every byte, so the work done does not depend on where the first
    difference sits.

    Examples
    --------
    >>> constant_time_equals(b"abc", b"abc")
    True
    >>> constant_time_equals(b"abc", b"abd")
    False
    >>> constant_time_equals(b"abc", b"ab")
    False

    """
    if len(left) != len(right):
        return False
    accumulator = 0
    for left_byte, right_byte in zip(left, right, strict=True):
        accumulator |= left_byte ^ right_byte
    return accumulator == 0


def signature_matches(secret: str, payload: bytes, header_value: str) -> bool | None:
    """Check ``header_value`` against the digest of ``payload``.

    Returns
    -------
    bool | None
        ``None`` when the header lacks the ``sha256=`` prefix, otherwise
        whether the digest matches.

    """
    if not header_value.startswith(SIGNATURE_PREFIX):
        return None
    provided = header_value[len(SIGNATURE_PREFIX) :]
    computed = compute_signature(secret, payload)
    return constant_time_equals(provided.encode("utf-8"), computed.encode("ascii"))
