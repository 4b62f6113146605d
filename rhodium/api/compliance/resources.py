"""Compliance status read endpoints.

``GET /compliance/{platform}/{owner}/{name}`` serves the latest status,
answering from the cache when it holds a fresh copy and filling the cache
after a document-store read. ``GET .../history`` lists earlier reports.

Usage
-----
Register the resources on the Falcon app::

    app.add_route(
        "/compliance/{platform}/{owner}/{name}",
        ComplianceResource(dependencies),
    )
    app.add_route(
        "/compliance/{platform}/{owner}/{name}/history",
        ComplianceHistoryResource(dependencies),
    )

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon
import msgspec

from rhodium.api.errors import ComplianceNotFoundError, InvalidInputError
from rhodium.common.slug import platform_repo_key
from rhodium.compliance.models import (
    decode_compliance_status,
    encode_compliance_status,
)
from rhodium.logging import get_logger, log_warning

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from rhodium.compliance.models import ComplianceStatus
    from rhodium.storage.protocols import CacheStore, DocumentStore

__all__ = [
    "ComplianceHistoryResource",
    "ComplianceResource",
    "ComplianceResourceDependencies",
]

logger = get_logger(__name__)

DEFAULT_CACHE_TTL_S = 300
DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100


@dc.dataclass(frozen=True, slots=True)
class ComplianceResourceDependencies:
    """Dependencies for the compliance resources.

    Attributes
    ----------
    documents
        Document store holding compliance reports.
    cache
        Optional cache consulted before the document store.
    cache_ttl_s
        Lifetime of cached statuses in seconds.

    """

    documents: DocumentStore
    cache: CacheStore | None = None
    cache_ttl_s: int = DEFAULT_CACHE_TTL_S


def _serialize_status(status: ComplianceStatus, *, source: str) -> dict[str, typ.Any]:
    media = typ.cast("dict[str, typ.Any]", msgspec.to_builtins(status))
    media["tier"] = status.tier.label
    media["tier_level"] = int(status.tier)
    media["state"] = "certified" if status.tier.is_certified else "uncertified"
    media["source"] = source
    return media


class ComplianceResource:
    """Resource returning the latest compliance status for a repository."""

    def __init__(self, dependencies: ComplianceResourceDependencies) -> None:
        """Configure the resource with its stores."""
        self._documents = dependencies.documents
        self._cache = dependencies.cache
        self._cache_ttl_s = dependencies.cache_ttl_s

    async def _cached(self, key: str) -> ComplianceStatus | None:
        if self._cache is None:
            return None
        raw = await self._cache.get_compliance(key)
        if raw is None:
            return None
        try:
            return decode_compliance_status(raw)
        except msgspec.DecodeError:
            # Stale or foreign cache entries fall through to the store.
            log_warning(logger, "Ignoring undecodable cached compliance for %s", key)
            return None

    async def on_get(
        self,
        _req: Request,
        resp: Response,
        *,
        platform: str,
        owner: str,
        name: str,
    ) -> None:
        """Handle GET /compliance/{platform}/{owner}/{name}.

        Raises
        ------
        ComplianceNotFoundError
            If no report exists for the repository.

        """
        key = platform_repo_key(platform, owner, name)
        cached = await self._cached(key)
        if cached is not None:
            resp.media = _serialize_status(cached, source="cache")
            resp.status = falcon.HTTP_200
            return

        status = await self._documents.get_latest_compliance(platform, owner, name)
        if status is None:
            raise ComplianceNotFoundError(platform, owner, name)
        if self._cache is not None:
            await self._cache.cache_compliance(
                key,
                encode_compliance_status(status).decode("utf-8"),
                self._cache_ttl_s,
            )
        resp.media = _serialize_status(status, source="store")
        resp.status = falcon.HTTP_200


def _parse_limit(raw: str | None) -> int:
    if raw is None:
        return DEFAULT_HISTORY_LIMIT
    try:
        limit = int(raw)
    except ValueError as exc:
        raise InvalidInputError("must be an integer", field="limit") from exc
    if not 1 <= limit <= MAX_HISTORY_LIMIT:
        reason = f"must be between 1 and {MAX_HISTORY_LIMIT}"
        raise InvalidInputError(reason, field="limit")
    return limit


class ComplianceHistoryResource:
    """Resource listing recent compliance reports, newest first."""

    def __init__(self, dependencies: ComplianceResourceDependencies) -> None:
        """Configure the resource with its document store."""
        self._documents = dependencies.documents

    async def on_get(
        self,
        req: Request,
        resp: Response,
        *,
        platform: str,
        owner: str,
        name: str,
    ) -> None:
        """Handle GET /compliance/{platform}/{owner}/{name}/history.

        The optional ``limit`` query parameter caps the number of reports.
        """
        limit = _parse_limit(req.get_param("limit"))
        history = await self._documents.get_compliance_history(
            platform, owner, name, limit
        )
        resp.media = {
            "repository": platform_repo_key(platform, owner, name),
            "reports": [_serialize_status(item, source="store") for item in history],
        }
        resp.status = falcon.HTTP_200
