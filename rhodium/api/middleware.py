"""ASGI lifespan middleware for Falcon applications.

Creates missing tables when the server starts and releases store and HTTP
client resources when it stops, so the application factory itself can stay
synchronous.

Usage
-----
Register the middleware when creating the Falcon app::

    from rhodium.api.middleware import ResourceLifecycle

    app = falcon.asgi.App(middleware=[ResourceLifecycle(stores, registry)])

"""

from __future__ import annotations

import typing as typ

from rhodium.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    from rhodium.adapters.registry import AdapterRegistry
    from rhodium.storage.handles import StoreHandles

__all__ = ["ResourceLifecycle"]

logger = get_logger(__name__)


class ResourceLifecycle:
    """Falcon middleware tying store and adapter lifetimes to the server.

    Parameters
    ----------
    stores
        Store handles whose schema is initialised on startup and which are
        closed on shutdown.
    registry
        Adapter registry whose HTTP clients are closed on shutdown.

    """

    def __init__(
        self,
        stores: StoreHandles | None = None,
        registry: AdapterRegistry | None = None,
    ) -> None:
        """Initialize the middleware with the resources it manages."""
        self._stores = stores
        self._registry = registry

    async def process_startup(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Create any missing document and graph tables."""
        if self._stores is not None:
            await self._stores.init_schema()
        log_info(logger, "Rhodium application started")

    async def process_shutdown(
        self, _scope: dict[str, typ.Any], _event: dict[str, typ.Any]
    ) -> None:
        """Close adapter HTTP clients and store connections."""
        if self._registry is not None:
            await self._registry.aclose()
        if self._stores is not None:
            await self._stores.aclose()
        log_info(logger, "Rhodium application stopped")
