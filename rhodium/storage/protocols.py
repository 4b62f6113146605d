"""Async interfaces for the stores the gateway depends on.

Implementations live beside these protocols; tests substitute in-memory
fakes. Every store answers ``ping`` so readiness checks can probe it.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from rhodium.adapters.payload import Payload
    from rhodium.compliance.models import ComplianceStatus
    from rhodium.storage.graphs import Dependency, Vulnerability


@typ.runtime_checkable
class DocumentStore(typ.Protocol):
    """Durable store for compliance reports and raw webhook events."""

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...

    async def store_compliance(self, status: ComplianceStatus) -> str:
        """Persist ``status`` and return its report identifier."""
        ...

    async def get_latest_compliance(
        self, platform: str, owner: str, repo: str
    ) -> ComplianceStatus | None:
        """Return the most recent report for a repository."""
        ...

    async def get_compliance_history(
        self, platform: str, owner: str, repo: str, limit: int
    ) -> list[ComplianceStatus]:
        """Return up to ``limit`` reports, newest first."""
        ...

    async def store_webhook_event(
        self, platform: str, event_type: str, payload: Payload
    ) -> str:
        """Persist a decoded webhook body and return its event identifier."""
        ...

    async def mark_webhook_event_processed(self, event_id: str) -> None:
        """Flag a stored webhook event as processed."""
        ...


@typ.runtime_checkable
class CacheStore(typ.Protocol):
    """Key-value cache, job queue, and rate-limit counters."""

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...

    async def cache_compliance(self, key: str, value: str, ttl_s: int) -> None:
        """Cache ``value`` under ``key`` for ``ttl_s`` seconds."""
        ...

    async def get_compliance(self, key: str) -> str | None:
        """Return the cached value for ``key``."""
        ...

    async def enqueue_job(self, queue: str, job: str) -> None:
        """Append ``job`` to ``queue``."""
        ...

    async def dequeue_job(self, queue: str) -> str | None:
        """Pop the oldest job from ``queue``."""
        ...

    async def rate_limit_increment(self, key: str, window_s: int) -> int:
        """Increment the counter for ``key`` and return its new value."""
        ...


@typ.runtime_checkable
class GraphStore(typ.Protocol):
    """Dependency and vulnerability relationships between repositories."""

    async def ping(self) -> None:
        """Raise if the store is unreachable."""
        ...

    async def add_dependency(
        self, repo_key: str, package_name: str, package_version: str
    ) -> None:
        """Record that ``repo_key`` depends on a package version."""
        ...

    async def get_dependencies(self, repo_key: str) -> list[Dependency]:
        """Return direct and transitive dependencies of ``repo_key``."""
        ...

    async def add_vulnerability(
        self, vulnerability: Vulnerability, package_name: str
    ) -> None:
        """Record that ``vulnerability`` affects ``package_name``."""
        ...

    async def get_affected_repos(self, vulnerability_id: str) -> list[str]:
        """Return repositories reaching an affected package."""
        ...

    async def get_dependents(self, repo_key: str) -> list[str]:
        """Return repositories that depend directly on ``repo_key``."""
        ...

    async def get_dependency_depth(self, repo_key: str) -> int:
        """Return the depth of the deepest dependency of ``repo_key``."""
        ...
