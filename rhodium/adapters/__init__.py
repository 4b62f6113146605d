"""Platform adapters that verify, normalize, and call hosting platforms."""

from __future__ import annotations

from .base import Headers, PlatformAdapter, RepoMetadata, as_headers
from .config import AdapterConfig
from .errors import (
    AdapterConfigError,
    AdapterError,
    PayloadDecodeError,
    PlatformError,
    RateLimitedError,
    RepoNotFoundError,
    UnsupportedPlatformError,
    WebhookVerificationError,
)
from .github import GitHubAdapter
from .registry import AdapterRegistry
from .signature import compute_signature, constant_time_equals
from .status import CommitState, build_status_payload

__all__ = [
    "AdapterConfig",
    "AdapterConfigError",
    "AdapterError",
    "AdapterRegistry",
    "CommitState",
    "GitHubAdapter",
    "Headers",
    "PayloadDecodeError",
    "PlatformAdapter",
    "PlatformError",
    "RateLimitedError",
    "RepoMetadata",
    "RepoNotFoundError",
    "UnsupportedPlatformError",
    "WebhookVerificationError",
    "as_headers",
    "build_status_payload",
    "compute_signature",
    "constant_time_equals",
]
