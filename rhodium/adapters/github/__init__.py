"""GitHub platform adapter."""

from __future__ import annotations

from .client import (
    EVENT_HEADER,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    SIGNATURE_HEADER,
    GitHubAdapter,
)
from .parsing import SUPPORTED_EVENT_TYPES, parse_event

__all__ = [
    "EVENT_HEADER",
    "GITHUB_API_URL",
    "GITHUB_API_VERSION",
    "SIGNATURE_HEADER",
    "SUPPORTED_EVENT_TYPES",
    "GitHubAdapter",
    "parse_event",
]
