"""Storage-layer error types."""

from __future__ import annotations


class StorageError(RuntimeError):
    """Base class for collaborator store failures."""


class TimezoneAwareRequiredError(StorageError, ValueError):
    """Raised when datetime inputs lack timezone information."""

    def __init__(self, context: str) -> None:
        """Attach a consistent message for the failing context."""
        super().__init__(f"{context} must be timezone aware")

    @classmethod
    def for_column(cls) -> TimezoneAwareRequiredError:
        """Return an error for a naive datetime bound to a UTC column."""
        return cls("stored datetime values")


class WebhookEventNotFoundError(StorageError, LookupError):
    """Raised when a webhook event id does not name a stored event."""

    def __init__(self, event_id: str) -> None:
        """Record the unknown identifier."""
        self.event_id = event_id
        super().__init__(f"webhook event not found: {event_id}")


class CacheConnectionError(StorageError):
    """Raised when the cache server cannot complete a command."""

    @classmethod
    def for_command(cls, command: str) -> CacheConnectionError:
        """Return an error naming the failed cache command."""
        return cls(f"cache command failed: {command}")
