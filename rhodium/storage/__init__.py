"""Collaborator stores: documents, cache and queue, and dependency graphs."""

from __future__ import annotations

from .cache import RedisCacheStore
from .documents import ComplianceReport, SQLDocumentStore, WebhookEvent
from .errors import (
    CacheConnectionError,
    StorageError,
    TimezoneAwareRequiredError,
    WebhookEventNotFoundError,
)
from .graphs import Dependency, SQLGraphStore, Vulnerability
from .handles import StoreConfig, StoreHandles, StoreHealth, init_storage
from .protocols import CacheStore, DocumentStore, GraphStore

__all__ = [
    "CacheConnectionError",
    "CacheStore",
    "ComplianceReport",
    "Dependency",
    "DocumentStore",
    "GraphStore",
    "RedisCacheStore",
    "SQLDocumentStore",
    "SQLGraphStore",
    "StorageError",
    "StoreConfig",
    "StoreHandles",
    "StoreHealth",
    "TimezoneAwareRequiredError",
    "Vulnerability",
    "WebhookEvent",
    "WebhookEventNotFoundError",
    "init_storage",
]
