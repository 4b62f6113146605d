"""SQLAlchemy-backed document store for compliance reports and webhooks."""

from __future__ import annotations

import datetime as dt
import typing as typ

from sqlalchemy import JSON, Boolean, Float, Index, Integer, String, select, text
from sqlalchemy.orm import Mapped, mapped_column

from rhodium.common.time import utcnow
from rhodium.compliance.models import CertificationTier, ComplianceStatus, RepoRef
from rhodium.logging import get_logger, log_debug
from rhodium.storage.errors import WebhookEventNotFoundError
from rhodium.storage.orm import Base, UTCDateTime

if typ.TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from rhodium.adapters.payload import Payload

logger = get_logger(__name__)


class ComplianceReport(Base):
    """One compliance result recorded for a repository."""

    __tablename__ = "compliance_reports"
    __table_args__ = (
        Index(
            "ix_compliance_reports_repo_time",
            "platform",
            "owner",
            "name",
            "created_at",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    platform: Mapped[str] = mapped_column(String(32))
    owner: Mapped[str] = mapped_column(String(255))
    name: Mapped[str] = mapped_column(String(255))
    branch: Mapped[str | None] = mapped_column(String(255), default=None)
    tier: Mapped[int] = mapped_column(Integer)
    score: Mapped[float] = mapped_column(Float)
    checked_at: Mapped[dt.datetime] = mapped_column(UTCDateTime())
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)

    def to_status(self) -> ComplianceStatus:
        """Return the stored row as a :class:`ComplianceStatus`."""
        return ComplianceStatus(
            platform=self.platform,
            repo=RepoRef(owner=self.owner, repo=self.name, branch=self.branch),
            tier=CertificationTier(self.tier),
            score=self.score,
            checked_at=self.checked_at,
        )


class WebhookEvent(Base):
    """Decoded webhook body awaiting downstream processing."""

    __tablename__ = "webhook_events"
    __table_args__ = (Index("ix_webhook_events_processed", "processed"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    platform: Mapped[str] = mapped_column(String(32))
    event_type: Mapped[str] = mapped_column(String(64))
    payload: Mapped[dict[str, typ.Any]] = mapped_column(JSON)
    processed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[dt.datetime] = mapped_column(UTCDateTime(), default=utcnow)


def _parse_event_id(event_id: str) -> int:
    try:
        return int(event_id)
    except ValueError as exc:
        raise WebhookEventNotFoundError(event_id) from exc


class SQLDocumentStore:
    """Document store writing through an async SQLAlchemy session factory.

    Identifiers returned by the store are the decimal form of the row's
    primary key.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Store the session factory used for every operation."""
        self._session_factory = session_factory

    async def ping(self) -> None:
        """Run a trivial query to prove the database answers."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    async def store_compliance(self, status: ComplianceStatus) -> str:
        """Persist ``status``; a missing ``checked_at`` is stamped with now."""
        log_debug(
            logger,
            "Storing compliance report for %s/%s",
            status.platform,
            status.repo.slug,
        )
        report = ComplianceReport(
            platform=status.platform,
            owner=status.repo.owner,
            name=status.repo.repo,
            branch=status.repo.branch,
            tier=int(status.tier),
            score=status.score,
            checked_at=status.checked_at or utcnow(),
        )
        async with self._session_factory() as session, session.begin():
            session.add(report)
            await session.flush()
            report_id = report.id
        return str(report_id)

    def _history_query(
        self, platform: str, owner: str, repo: str
    ) -> Select[tuple[ComplianceReport]]:
        return (
            select(ComplianceReport)
            .where(
                ComplianceReport.platform == platform,
                ComplianceReport.owner == owner,
                ComplianceReport.name == repo,
            )
            .order_by(ComplianceReport.created_at.desc(), ComplianceReport.id.desc())
        )

    async def get_latest_compliance(
        self, platform: str, owner: str, repo: str
    ) -> ComplianceStatus | None:
        """Return the newest report for a repository, if any."""
        async with self._session_factory() as session:
            report = await session.scalar(
                self._history_query(platform, owner, repo).limit(1)
            )
        return None if report is None else report.to_status()

    async def get_compliance_history(
        self, platform: str, owner: str, repo: str, limit: int
    ) -> list[ComplianceStatus]:
        """Return up to ``limit`` reports for a repository, newest first."""
        if limit <= 0:
            return []
        async with self._session_factory() as session:
            reports = await session.scalars(
                self._history_query(platform, owner, repo).limit(limit)
            )
            return [report.to_status() for report in reports]

    async def store_webhook_event(
        self, platform: str, event_type: str, payload: Payload
    ) -> str:
        """Persist a decoded webhook body as an unprocessed event."""
        log_debug(logger, "Storing webhook event: %s/%s", platform, event_type)
        event = WebhookEvent(platform=platform, event_type=event_type, payload=payload)
        async with self._session_factory() as session, session.begin():
            session.add(event)
            await session.flush()
            event_id = event.id
        return str(event_id)

    async def mark_webhook_event_processed(self, event_id: str) -> None:
        """Set ``processed`` on a stored event.

        Raises
        ------
        WebhookEventNotFoundError
            If ``event_id`` names no stored event.

        """
        async with self._session_factory() as session, session.begin():
            event = await session.get(WebhookEvent, _parse_event_id(event_id))
            if event is None:
                raise WebhookEventNotFoundError(event_id)
            event.processed = True

    async def get_webhook_event(self, event_id: str) -> WebhookEvent | None:
        """Return a stored webhook event by identifier."""
        try:
            key = _parse_event_id(event_id)
        except WebhookEventNotFoundError:
            return None
        async with self._session_factory() as session:
            return await session.get(WebhookEvent, key)
