"""Rhodium runtime entrypoint for container deployments.

This module provides the ASGI application factory used by Granian. It
builds the adapter registry and store handles from the environment and
delegates to :func:`rhodium.api.app.create_app`.

Configuration is driven by environment variables:

- ``RHODIUM_HOST``: Bind address (default ``0.0.0.0``)
- ``RHODIUM_PORT``: Listen port (default ``8080``)
- ``RHODIUM_LOG_LEVEL``: Log level (default ``INFO``)
- ``RHODIUM_DATABASE_URL``: SQLAlchemy URL for the document and graph
  stores (optional; enables the compliance endpoints)
- ``RHODIUM_REDIS_URL``: Redis URL for the cache and job queue (optional)
- ``RHODIUM_GITHUB_*``: GitHub adapter settings, see
  :meth:`rhodium.adapters.config.AdapterConfig.from_env`

Run the service directly with ``python -m rhodium.runtime``.
"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from rhodium.adapters.registry import AdapterRegistry
from rhodium.api.app import AppDependencies
from rhodium.api.app import create_app as _create_api_app
from rhodium.logging import (
    configure_logging,
    get_logger,
    log_error,
    log_info,
    log_warning,
)
from rhodium.storage.handles import StoreConfig, StoreHandles

if typ.TYPE_CHECKING:
    import falcon.asgi

__all__ = ["RuntimeSettings", "create_app", "main"]

logger = get_logger(__name__)

_PORTS = range(1, 65536)


def _parse_port(raw: str) -> int:
    """Return ``raw`` as a TCP port, exiting with status 1 when it is not one."""
    port = int(raw) if raw.strip().isdecimal() else None
    if port is None or port not in _PORTS:
        log_error(logger, "RHODIUM_PORT must be an integer 1-65535, got %r", raw)
        raise SystemExit(1)
    return port


def create_app() -> falcon.asgi.App:
    """Create the Falcon ASGI application from environment configuration.

    The GitHub adapter is always registered. Stores are attached only when
    their URLs are set; without ``RHODIUM_DATABASE_URL`` the compliance
    endpoints are absent.

    Returns
    -------
    falcon.asgi.App
        Configured Falcon ASGI application.

    """
    registry = AdapterRegistry.from_env()
    stores = StoreHandles.from_config(StoreConfig.from_env())
    return _create_api_app(AppDependencies(registry=registry, stores=stores))


@dc.dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Server settings read once at start-up.

    Attributes
    ----------
    host
        Bind address.
    port
        Listen port, validated by :func:`_parse_port`.
    log_level
        Raw ``RHODIUM_LOG_LEVEL`` value; normalized by
        :func:`rhodium.logging.configure_logging`.

    """

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> RuntimeSettings:
        """Build settings from ``RHODIUM_HOST``, ``_PORT`` and ``_LOG_LEVEL``.

        Raises
        ------
        SystemExit
            If ``RHODIUM_PORT`` is not a valid port number.

        """
        defaults = cls()
        return cls(
            host=os.environ.get("RHODIUM_HOST", defaults.host),
            port=_parse_port(os.environ.get("RHODIUM_PORT", str(defaults.port))),
            log_level=os.environ.get("RHODIUM_LOG_LEVEL", defaults.log_level),
        )


def main() -> None:
    """Serve :func:`create_app` with Granian using :class:`RuntimeSettings`."""
    from granian import Granian
    from granian.constants import Interfaces

    settings = RuntimeSettings.from_env()
    level, rejected = configure_logging(settings.log_level)
    if rejected:
        log_warning(
            logger,
            "Ignoring RHODIUM_LOG_LEVEL=%r; logging at %s",
            settings.log_level,
            level,
        )
    log_info(logger, "Rhodium listening on %s:%d", settings.host, settings.port)

    Granian(
        "rhodium.runtime:create_app",
        address=settings.host,
        port=settings.port,
        interface=Interfaces.ASGI,
        factory=True,
    ).serve()


if __name__ == "__main__":
    main()
