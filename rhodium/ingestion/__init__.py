"""Webhook ingestion: verification, normalization, persistence, queueing."""

from __future__ import annotations

from .observability import (
    ErrorCategory,
    WebhookEventLogger,
    WebhookEventType,
    categorize_error,
)
from .service import (
    PING_KIND,
    WEBHOOK_QUEUE,
    IngestionReceipt,
    WebhookIngestionService,
)

__all__ = [
    "PING_KIND",
    "WEBHOOK_QUEUE",
    "ErrorCategory",
    "IngestionReceipt",
    "WebhookEventLogger",
    "WebhookEventType",
    "WebhookIngestionService",
    "categorize_error",
]
