"""Explicitly constructed handles to the gateway's collaborator stores."""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from rhodium.logging import get_logger, log_info, log_warning
from rhodium.storage.cache import RedisCacheStore
from rhodium.storage.documents import SQLDocumentStore
from rhodium.storage.graphs import SQLGraphStore
from rhodium.storage.orm import Base

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from rhodium.storage.protocols import CacheStore, DocumentStore, GraphStore

logger = get_logger(__name__)


async def init_storage(engine: AsyncEngine) -> None:
    """Create every document and graph table if absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@dc.dataclass(frozen=True, slots=True)
class StoreConfig:
    """Connection settings for the collaborator stores.

    Either URL may be ``None``; the matching stores are then not configured
    and the gateway runs without them.
    """

    database_url: str | None = None
    redis_url: str | None = None

    @classmethod
    def from_env(cls) -> StoreConfig:
        """Read ``RHODIUM_DATABASE_URL`` and ``RHODIUM_REDIS_URL``."""
        return cls(
            database_url=os.environ.get("RHODIUM_DATABASE_URL", "").strip() or None,
            redis_url=os.environ.get("RHODIUM_REDIS_URL", "").strip() or None,
        )


@dc.dataclass(frozen=True, slots=True)
class StoreHealth:
    """Result of pinging each configured store.

    A store that is not configured reports ``False``.
    """

    cache: bool = False
    documents: bool = False
    graphs: bool = False

    def as_dict(self) -> dict[str, bool]:
        """Return the health flags as a JSON-ready mapping."""
        return dc.asdict(self)


async def _ping(
    name: str, store: DocumentStore | CacheStore | GraphStore | None
) -> bool:
    if store is None:
        return False
    try:
        await store.ping()
    except Exception as exc:  # noqa: BLE001
        log_warning(logger, "Store %s failed its health check", name, exc_info=exc)
        return False
    return True


@dc.dataclass(slots=True)
class StoreHandles:
    """Optional store handles passed to the services that need them.

    Nothing here is global: the runtime builds one instance and hands it to
    the ingestion service and the HTTP application.
    """

    documents: DocumentStore | None = None
    cache: CacheStore | None = None
    graphs: GraphStore | None = None
    engine: AsyncEngine | None = None

    @property
    def configured(self) -> dict[str, bool]:
        """Return which stores are present."""
        return {
            "cache": self.cache is not None,
            "documents": self.documents is not None,
            "graphs": self.graphs is not None,
        }

    @classmethod
    def from_config(cls, config: StoreConfig) -> StoreHandles:
        """Build handles for every store ``config`` names.

        The SQL database backs both the document and graph stores. No
        connection is opened here; call :meth:`init_schema` before use.
        """
        handles = cls()
        if config.database_url is not None:
            engine = create_async_engine(config.database_url)
            session_factory = async_sessionmaker(engine, expire_on_commit=False)
            handles.engine = engine
            handles.documents = SQLDocumentStore(session_factory)
            handles.graphs = SQLGraphStore(session_factory)
        if config.redis_url is not None:
            handles.cache = RedisCacheStore.from_url(config.redis_url)
        log_info(
            logger,
            "Store handles ready: documents=%s cache=%s graphs=%s",
            handles.documents is not None,
            handles.cache is not None,
            handles.graphs is not None,
        )
        return handles

    async def init_schema(self) -> None:
        """Create missing document and graph tables."""
        if self.engine is not None:
            await init_storage(self.engine)

    async def health_check(self) -> StoreHealth:
        """Ping each configured store and report which answered."""
        return StoreHealth(
            cache=await _ping("cache", self.cache),
            documents=await _ping("documents", self.documents),
            graphs=await _ping("graphs", self.graphs),
        )

    async def aclose(self) -> None:
        """Close the cache client and dispose of the SQL engine."""
        if isinstance(self.cache, RedisCacheStore):
            await self.cache.aclose()
        if self.engine is not None:
            await self.engine.dispose()
