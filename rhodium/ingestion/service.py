"""Accept inbound webhooks and hand canonical events to downstream workers."""

from __future__ import annotations

import datetime as dt
import time
import typing as typ

import msgspec

from rhodium.adapters.base import as_headers
from rhodium.adapters.errors import WebhookVerificationError
from rhodium.adapters.payload import decode_object
from rhodium.events.models import decode_event, encode_event, event_kind
from rhodium.ingestion.observability import WebhookEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from rhodium.adapters.base import Headers
    from rhodium.adapters.registry import AdapterRegistry
    from rhodium.events.models import RepoEvent
    from rhodium.storage.handles import StoreHandles

WEBHOOK_QUEUE = "webhook-events"
PING_KIND = "ping"


class IngestionReceipt(msgspec.Struct, kw_only=True, frozen=True):
    """What happened to one accepted webhook.

    Attributes
    ----------
    platform
        Platform the webhook arrived for.
    event_type
        Platform event type header value.
    kind
        Canonical event tag, or ``"ping"`` for connectivity checks.
    repo_slug
        ``owner/name`` of the repository, empty for pings.
    event_id
        Identifier assigned by the document store, when one is configured.
    queued
        Whether the canonical event was pushed onto the work queue.

    """

    platform: str
    event_type: str
    kind: str
    repo_slug: str = ""
    event_id: str | None = None
    queued: bool = False

    @property
    def is_ping(self) -> bool:
        """Return whether the webhook was a connectivity check."""
        return self.kind == PING_KIND


class WebhookIngestionService:
    """Verify, normalize, record, and enqueue inbound webhooks.

    Parameters
    ----------
    registry
        Adapters keyed by platform identifier.
    stores
        Optional collaborator stores. Without a document store the raw body
        is not persisted; without a cache store nothing is enqueued.
    event_logger
        Structured logger for ingestion outcomes.

    """

    def __init__(
        self,
        registry: AdapterRegistry,
        stores: StoreHandles | None = None,
        *,
        event_logger: WebhookEventLogger | None = None,
    ) -> None:
        """Store collaborators for later ingestion calls."""
        self._registry = registry
        self._stores = stores
        self._event_logger = event_logger or WebhookEventLogger()

    async def ingest(
        self,
        platform: str,
        payload: bytes,
        headers: cabc.Mapping[str, str] | Headers,
    ) -> IngestionReceipt:
        """Process one webhook request body.

        Steps run in order: resolve the adapter, verify the signature, parse
        the canonical event, persist the decoded body, and enqueue the event.
        Verification happens before anything is parsed or stored.

        Raises
        ------
        WebhookVerificationError
            If the signature is missing, malformed, or does not match.
        PlatformError
            If the platform is unknown, or the event type is missing or
            unsupported, or the body is not a JSON object.
        AdapterConfigError
            If verification requires a secret that is not configured.

        """
        started_at = time.monotonic()
        wrapped = as_headers(headers)
        event_type: str | None = None
        self._event_logger.log_received(platform, len(payload))
        try:
            adapter = self._registry.get(platform)
            if not adapter.verify_webhook(payload, wrapped):
                raise WebhookVerificationError.signature_mismatch()
            event_type = adapter.event_type(wrapped)
            if adapter.is_ping(wrapped):
                receipt = IngestionReceipt(
                    platform=platform, event_type=event_type, kind=PING_KIND
                )
            else:
                event = adapter.parse_webhook(payload, wrapped)
                receipt = await self._record(platform, event_type, payload, event)
        except Exception as exc:
            self._event_logger.log_failed(
                platform, event_type, exc, self._elapsed(started_at)
            )
            raise

        self._event_logger.log_accepted(
            platform,
            receipt.event_type,
            receipt.kind,
            receipt.repo_slug,
            receipt.event_id,
            self._elapsed(started_at),
        )
        return receipt

    async def _record(
        self, platform: str, event_type: str, payload: bytes, event: RepoEvent
    ) -> IngestionReceipt:
        stores = self._stores
        event_id: str | None = None
        queued = False
        if stores is not None and stores.documents is not None:
            event_id = await stores.documents.store_webhook_event(
                platform, event_type, decode_object(payload)
            )
        if stores is not None and stores.cache is not None:
            await stores.cache.enqueue_job(
                WEBHOOK_QUEUE, encode_event(event).decode("utf-8")
            )
            queued = True
        return IngestionReceipt(
            platform=platform,
            event_type=event_type,
            kind=event_kind(event),
            repo_slug=event.repo_slug,
            event_id=event_id,
            queued=queued,
        )

    async def next_event(self) -> RepoEvent | None:
        """Pop and decode the oldest queued canonical event, if any."""
        if self._stores is None or self._stores.cache is None:
            return None
        job = await self._stores.cache.dequeue_job(WEBHOOK_QUEUE)
        if job is None:
            return None
        return decode_event(job)

    @staticmethod
    def _elapsed(started_at: float) -> dt.timedelta:
        return dt.timedelta(seconds=time.monotonic() - started_at)
