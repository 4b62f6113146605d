"""Application factory for the Rhodium Falcon ASGI application.

This module provides ``create_app()`` which builds the Falcon ASGI
application with health endpoints and, when the matching dependencies are
supplied, the webhook receiver and compliance read endpoints.

Usage
-----
Create a health-only app::

    app = create_app()

Create a full app::

    from rhodium.api.app import AppDependencies, create_app

    deps = AppDependencies(registry=registry, stores=stores)
    app = create_app(deps)

"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

import falcon.asgi

from rhodium.api.compliance.resources import (
    DEFAULT_CACHE_TTL_S,
    ComplianceHistoryResource,
    ComplianceResource,
    ComplianceResourceDependencies,
)
from rhodium.api.errors import register_error_handlers
from rhodium.api.health.resources import HealthResource, ReadyResource
from rhodium.api.middleware import ResourceLifecycle
from rhodium.api.webhooks.resources import WebhookResource
from rhodium.ingestion.service import WebhookIngestionService

if typ.TYPE_CHECKING:
    from rhodium.adapters.registry import AdapterRegistry
    from rhodium.storage.handles import StoreHandles

__all__ = ["AppDependencies", "create_app"]


@dc.dataclass(frozen=True, slots=True)
class AppDependencies:
    """Dependencies for the Falcon ASGI application.

    Attributes
    ----------
    registry
        Platform adapters. Enables ``POST /webhooks/{platform}``.
    stores
        Collaborator stores. A document store enables the compliance
        endpoints; every configured store takes part in readiness.
    ingestion_service
        Pre-built ingestion service. Built from ``registry`` and ``stores``
        when omitted.
    compliance_cache_ttl_s
        Lifetime of cached compliance statuses.

    """

    registry: AdapterRegistry | None = None
    stores: StoreHandles | None = None
    ingestion_service: WebhookIngestionService | None = None
    compliance_cache_ttl_s: int = DEFAULT_CACHE_TTL_S


def _ingestion_service(deps: AppDependencies) -> WebhookIngestionService | None:
    if deps.ingestion_service is not None:
        return deps.ingestion_service
    if deps.registry is None:
        return None
    return WebhookIngestionService(deps.registry, deps.stores)


def create_app(
    dependencies: AppDependencies | None = None,
) -> falcon.asgi.App:
    """Create and configure the Falcon ASGI application.

    ``/health`` and ``/ready`` are always registered. The webhook route needs
    an adapter registry or ingestion service, and the compliance routes need
    a document store.

    Parameters
    ----------
    dependencies
        Optional application dependencies. When ``None``, only health
        endpoints are available.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    deps = dependencies or AppDependencies()
    lifecycle = ResourceLifecycle(deps.stores, deps.registry)
    app = falcon.asgi.App(middleware=[lifecycle])  # type: ignore[no-matching-overload]  # Falcon stubs

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(deps.stores))

    ingestion = _ingestion_service(deps)
    if ingestion is not None:
        app.add_route("/webhooks/{platform}", WebhookResource(ingestion))

    if deps.stores is not None and deps.stores.documents is not None:
        compliance_deps = ComplianceResourceDependencies(
            documents=deps.stores.documents,
            cache=deps.stores.cache,
            cache_ttl_s=deps.compliance_cache_ttl_s,
        )
        app.add_route(
            "/compliance/{platform}/{owner}/{name}",
            ComplianceResource(compliance_deps),
        )
        app.add_route(
            "/compliance/{platform}/{owner}/{name}/history",
            ComplianceHistoryResource(compliance_deps),
        )

    register_error_handlers(app)
    return app
