"""Health probe resources for liveness and readiness checks.

Liveness never touches a store. Readiness pings every configured store and
reports 503 when one of them does not answer, so orchestrators stop routing
webhooks to an instance that cannot record them.

Usage
-----
Register health endpoints on the Falcon app::

    from rhodium.api.health.resources import HealthResource, ReadyResource

    app.add_route("/health", HealthResource())
    app.add_route("/ready", ReadyResource(stores))

"""

from __future__ import annotations

import typing as typ
from http import HTTPStatus

if typ.TYPE_CHECKING:
    from falcon.asgi import Request, Response

    from rhodium.storage.handles import StoreHandles

__all__ = ["HealthResource", "ReadyResource"]


class HealthResource:
    """Liveness probe resource returning ``{"status": "ok"}``."""

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /health requests."""
        resp.media = {"status": "ok"}
        resp.status = HTTPStatus.OK


class ReadyResource:
    """Readiness probe resource.

    Responds ``{"status": "ready", "stores": {...}}`` with HTTP 200 when every
    configured store answers its ping, and ``{"status": "unavailable", ...}``
    with HTTP 503 otherwise. Stores that are not configured are reported as
    ``false`` and do not affect readiness.

    """

    def __init__(self, stores: StoreHandles | None = None) -> None:
        """Configure the resource with optional store handles."""
        self._stores = stores

    async def on_get(self, _req: Request, resp: Response) -> None:
        """Handle GET /ready requests.

        Parameters
        ----------
        _req
            Falcon request (unused).
        resp
            Falcon response populated with readiness status.

        """
        if self._stores is None:
            resp.media = {"status": "ready", "stores": {}}
            resp.status = HTTPStatus.OK
            return

        health = (await self._stores.health_check()).as_dict()
        configured = self._stores.configured
        ready = all(health[name] for name, present in configured.items() if present)
        resp.media = {
            "status": "ready" if ready else "unavailable",
            "stores": health,
        }
        resp.status = HTTPStatus.OK if ready else HTTPStatus.SERVICE_UNAVAILABLE
