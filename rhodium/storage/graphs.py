"""Dependency and vulnerability graph persisted in SQL tables.

Nodes are plain string keys. A repository key such as ``github:octo/reef``
has outbound ``depends_on`` edges to package names; a package name that is
itself a repository key continues the walk, which is how transitive
dependencies arise. Traversals stop at ``MAX_TRAVERSAL_DEPTH`` hops and
tolerate cycles.
"""

from __future__ import annotations

import typing as typ

import msgspec
from sqlalchemy import JSON, Index, String, UniqueConstraint, select, text
from sqlalchemy.orm import Mapped, mapped_column

from rhodium.logging import get_logger, log_debug
from rhodium.storage.orm import Base

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = get_logger(__name__)

MAX_TRAVERSAL_DEPTH = 10


class Dependency(msgspec.Struct, kw_only=True, frozen=True):
    """A package reached from a repository.

    ``depth`` counts hops from the repository; ``direct`` is ``depth == 1``.
    """

    name: str
    version: str
    depth: int
    direct: bool


class Vulnerability(msgspec.Struct, kw_only=True, frozen=True):
    """A published vulnerability and the versions it spans."""

    id: str
    severity: str
    affected_versions: tuple[str, ...] = ()
    patched_versions: tuple[str, ...] = ()


class DependencyEdge(Base):
    """Directed ``repo_key -> package_name`` edge."""

    __tablename__ = "dependency_edges"
    __table_args__ = (
        UniqueConstraint("repo_key", "package_name", name="uq_dependency_edge"),
        Index("ix_dependency_edges_package", "package_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    repo_key: Mapped[str] = mapped_column(String(512))
    package_name: Mapped[str] = mapped_column(String(512))
    package_version: Mapped[str] = mapped_column(String(128))


class VulnerabilityImpact(Base):
    """Directed ``vulnerability -> package_name`` edge with advisory data."""

    __tablename__ = "vulnerability_impacts"
    __table_args__ = (
        UniqueConstraint(
            "vulnerability_id", "package_name", name="uq_vulnerability_impact"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    vulnerability_id: Mapped[str] = mapped_column(String(128))
    package_name: Mapped[str] = mapped_column(String(512))
    severity: Mapped[str] = mapped_column(String(32))
    affected_versions: Mapped[list[str]] = mapped_column(JSON)
    patched_versions: Mapped[list[str]] = mapped_column(JSON)


class SQLGraphStore:
    """Graph store answering traversal queries level by level."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for every operation."""
        self._session_factory = session_factory

    async def ping(self) -> None:
        """Run a trivial query to prove the database answers."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    async def add_dependency(
        self, repo_key: str, package_name: str, package_version: str
    ) -> None:
        """Insert or update the edge from ``repo_key`` to ``package_name``."""
        log_debug(
            logger,
            "Adding dependency: %s -> %s@%s",
            repo_key,
            package_name,
            package_version,
        )
        async with self._session_factory() as session, session.begin():
            edge = await session.scalar(
                select(DependencyEdge).where(
                    DependencyEdge.repo_key == repo_key,
                    DependencyEdge.package_name == package_name,
                )
            )
            if edge is None:
                session.add(
                    DependencyEdge(
                        repo_key=repo_key,
                        package_name=package_name,
                        package_version=package_version,
                    )
                )
            else:
                edge.package_version = package_version

    async def _outbound(
        self, session: AsyncSession, keys: cabc.Collection[str]
    ) -> list[DependencyEdge]:
        result = await session.scalars(
            select(DependencyEdge)
            .where(DependencyEdge.repo_key.in_(keys))
            .order_by(DependencyEdge.repo_key, DependencyEdge.package_name)
        )
        return list(result)

    async def _inbound(
        self, session: AsyncSession, keys: cabc.Collection[str]
    ) -> list[str]:
        result = await session.scalars(
            select(DependencyEdge.repo_key).where(
                DependencyEdge.package_name.in_(keys)
            )
        )
        return list(result)

    async def get_dependencies(self, repo_key: str) -> list[Dependency]:
        """Return every package reachable from ``repo_key`` within range.

        Each package appears once, at the depth it was first reached.
        """
        found: list[Dependency] = []
        seen = {repo_key}
        frontier = [repo_key]
        async with self._session_factory() as session:
            for depth in range(1, MAX_TRAVERSAL_DEPTH + 1):
                if not frontier:
                    break
                next_frontier: list[str] = []
                for edge in await self._outbound(session, frontier):
                    if edge.package_name in seen:
                        continue
                    seen.add(edge.package_name)
                    next_frontier.append(edge.package_name)
                    found.append(
                        Dependency(
                            name=edge.package_name,
                            version=edge.package_version,
                            depth=depth,
                            direct=depth == 1,
                        )
                    )
                frontier = next_frontier
        return found

    async def get_dependency_depth(self, repo_key: str) -> int:
        """Return the largest dependency depth, or ``0`` without dependencies."""
        dependencies = await self.get_dependencies(repo_key)
        return max((dep.depth for dep in dependencies), default=0)

    async def add_vulnerability(
        self, vulnerability: Vulnerability, package_name: str
    ) -> None:
        """Record that ``vulnerability`` affects ``package_name``."""
        log_debug(
            logger, "Adding vulnerability %s on %s", vulnerability.id, package_name
        )
        async with self._session_factory() as session, session.begin():
            impact = await session.scalar(
                select(VulnerabilityImpact).where(
                    VulnerabilityImpact.vulnerability_id == vulnerability.id,
                    VulnerabilityImpact.package_name == package_name,
                )
            )
            if impact is None:
                impact = VulnerabilityImpact(
                    vulnerability_id=vulnerability.id, package_name=package_name
                )
                session.add(impact)
            impact.severity = vulnerability.severity
            impact.affected_versions = list(vulnerability.affected_versions)
            impact.patched_versions = list(vulnerability.patched_versions)

    async def get_affected_repos(self, vulnerability_id: str) -> list[str]:
        """Return sorted repository keys that reach an affected package."""
        log_debug(logger, "Getting repos affected by %s", vulnerability_id)
        async with self._session_factory() as session:
            packages = await session.scalars(
                select(VulnerabilityImpact.package_name).where(
                    VulnerabilityImpact.vulnerability_id == vulnerability_id
                )
            )
            frontier = list(packages)
            seen = set(frontier)
            repos: set[str] = set()
            for _ in range(MAX_TRAVERSAL_DEPTH):
                if not frontier:
                    break
                dependents = await self._inbound(session, frontier)
                repos.update(dependents)
                frontier = [key for key in dependents if key not in seen]
                seen.update(frontier)
        return sorted(repos)

    async def get_dependents(self, repo_key: str) -> list[str]:
        """Return sorted keys of repositories depending directly on ``repo_key``."""
        async with self._session_factory() as session:
            return sorted(set(await self._inbound(session, [repo_key])))
