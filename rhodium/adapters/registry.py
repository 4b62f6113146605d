"""Route platform identifiers to adapter instances."""

from __future__ import annotations

import typing as typ

from rhodium.adapters.config import AdapterConfig
from rhodium.adapters.errors import UnsupportedPlatformError
from rhodium.adapters.github import GitHubAdapter

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rhodium.adapters.base import PlatformAdapter


class AdapterRegistry:
    """Hold one adapter per platform and resolve them by ``platform_id``.

    Shared code looks adapters up here instead of branching on platform
    names; adding a platform means registering another adapter.

    Examples
    --------
    >>> registry = AdapterRegistry([GitHubAdapter(AdapterConfig())])
    >>> registry.get("github").platform_id
    'github'

    """

    def __init__(self, adapters: cabc.Iterable[PlatformAdapter] = ()) -> None:
        """Register each adapter in ``adapters``."""
        self._adapters: dict[str, PlatformAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: PlatformAdapter) -> None:
        """Add ``adapter``, replacing any adapter with the same identifier."""
        self._adapters[adapter.platform_id] = adapter

    def get(self, platform: str) -> PlatformAdapter:
        """Return the adapter registered for ``platform``.

        Raises
        ------
        UnsupportedPlatformError
            If no adapter is registered under ``platform``.

        """
        adapter = self._adapters.get(platform)
        if adapter is None:
            raise UnsupportedPlatformError(platform)
        return adapter

    def __contains__(self, platform: object) -> bool:
        """Return whether an adapter is registered for ``platform``."""
        return platform in self._adapters

    @property
    def platform_ids(self) -> tuple[str, ...]:
        """Return the registered identifiers in sorted order."""
        return tuple(sorted(self._adapters))

    @classmethod
    def from_env(cls) -> AdapterRegistry:
        """Build a registry with every built-in adapter configured from env."""
        return cls([GitHubAdapter(AdapterConfig.from_env("github"))])

    async def aclose(self) -> None:
        """Close every registered adapter."""
        for adapter in self._adapters.values():
            await adapter.aclose()
