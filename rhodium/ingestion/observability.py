"""Structured log events for webhook ingestion.

Each event is one line of the form ``[webhook.accepted] key=value ...`` so log
aggregators can parse throughput and rejection reasons without a metrics
backend.
"""

from __future__ import annotations

import enum
import typing as typ

from sqlalchemy.exc import SQLAlchemyError

from rhodium.adapters.errors import (
    AdapterConfigError,
    PayloadDecodeError,
    PlatformError,
    RateLimitedError,
    WebhookVerificationError,
)
from rhodium.logging import get_logger, log_error, log_info, log_warning
from rhodium.storage.errors import StorageError

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)


class WebhookEventType(enum.StrEnum):
    """Structured log event types for webhook ingestion."""

    RECEIVED = "webhook.received"
    ACCEPTED = "webhook.accepted"
    REJECTED = "webhook.rejected"
    FAILED = "webhook.failed"


class ErrorCategory(enum.StrEnum):
    """Why a webhook was not accepted."""

    VERIFICATION = "verification"
    MALFORMED_PAYLOAD = "malformed_payload"
    UNSUPPORTED = "unsupported"
    CONFIGURATION = "configuration"
    RATE_LIMITED = "rate_limited"
    STORAGE = "storage"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (WebhookVerificationError, ErrorCategory.VERIFICATION),
    (PayloadDecodeError, ErrorCategory.MALFORMED_PAYLOAD),
    (PlatformError, ErrorCategory.UNSUPPORTED),
    (AdapterConfigError, ErrorCategory.CONFIGURATION),
    (RateLimitedError, ErrorCategory.RATE_LIMITED),
    (StorageError, ErrorCategory.STORAGE),
    (SQLAlchemyError, ErrorCategory.STORAGE),
)

# Sender-side faults; these log at WARNING.
_REJECTION_CATEGORIES = frozenset(
    {
        ErrorCategory.VERIFICATION,
        ErrorCategory.MALFORMED_PAYLOAD,
        ErrorCategory.UNSUPPORTED,
    }
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Return the category used to label a failed ingestion.

    ``PayloadDecodeError`` is checked before its parent ``PlatformError``.
    """
    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category
    return ErrorCategory.UNKNOWN


class WebhookEventLogger:
    """Emit structured webhook ingestion events through femtologging.

    Accepted webhooks log at INFO, sender faults at WARNING, and server-side
    failures at ERROR with the exception attached.
    """

    def log_received(self, platform: str, size: int) -> None:
        """Log the arrival of a webhook body."""
        log_info(
            logger,
            "[%s] platform=%s payload_bytes=%d",
            WebhookEventType.RECEIVED,
            platform,
            size,
        )

    def log_accepted(  # noqa: PLR0913
        self,
        platform: str,
        event_type: str,
        kind: str,
        repo_slug: str,
        event_id: str | None,
        duration: dt.timedelta,
    ) -> None:
        """Log a verified, parsed, and recorded webhook."""
        log_info(
            logger,
            "[%s] platform=%s event_type=%s kind=%s repo_slug=%s event_id=%s "
            "duration_seconds=%.3f",
            WebhookEventType.ACCEPTED,
            platform,
            event_type,
            kind,
            repo_slug,
            event_id,
            duration.total_seconds(),
        )

    def log_failed(
        self,
        platform: str,
        event_type: str | None,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a webhook that was rejected or could not be recorded."""
        category = categorize_error(error)
        template = (
            "[%s] platform=%s event_type=%s duration_seconds=%.3f "
            "error_type=%s error_category=%s error_message=%s"
        )
        if category in _REJECTION_CATEGORIES:
            log_warning(
                logger,
                template,
                WebhookEventType.REJECTED,
                platform,
                event_type,
                duration.total_seconds(),
                type(error).__name__,
                category,
                str(error),
            )
            return
        log_error(
            logger,
            template,
            WebhookEventType.FAILED,
            platform,
            event_type,
            duration.total_seconds(),
            type(error).__name__,
            category,
            str(error),
            exc_info=error,
        )
