"""Errors raised by platform adapters.

Field-level gaps in webhook payloads are never errors; these exceptions cover
the structural and contractual failures callers must react to. Callers retry
``RateLimitedError`` with backoff and treat ``RepoNotFoundError`` as a
renamed or deleted repository rather than a transient fault.
"""

from __future__ import annotations

# Provider error bodies can be large HTML pages; keep messages readable.
_DETAIL_PREVIEW_LIMIT = 500


def _preview(detail: str) -> str:
    if len(detail) > _DETAIL_PREVIEW_LIMIT:
        return detail[:_DETAIL_PREVIEW_LIMIT] + "..."
    return detail


class AdapterError(Exception):
    """Base class for every platform adapter error."""


class WebhookVerificationError(AdapterError):
    """Raised when a webhook signature is missing, malformed, or wrong."""

    @classmethod
    def missing_signature(cls, header: str) -> WebhookVerificationError:
        """Return an error for a request without a signature header."""
        return cls(f"webhook signature header {header} is missing")

    @classmethod
    def malformed_signature(cls, header: str) -> WebhookVerificationError:
        """Return an error for a signature lacking the expected prefix."""
        return cls(f"webhook signature header {header} is malformed")

    @classmethod
    def signature_mismatch(cls) -> WebhookVerificationError:
        """Return an error for a signature that does not match the payload."""
        return cls("webhook signature does not match payload")


class PlatformError(AdapterError):
    """Raised for unsupported input or a failed platform API call."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def missing_event_type(cls, header: str) -> PlatformError:
        """Return an error for a webhook without an event type header."""
        return cls(f"missing event type header {header}")

    @classmethod
    def unsupported_event_type(cls, event_type: str) -> PlatformError:
        """Return an error naming a webhook event type with no parser."""
        return cls(f"unsupported event type: {event_type}")

    @classmethod
    def api_error(cls, operation: str, status_code: int, detail: str) -> PlatformError:
        """Return an error for a non-2xx platform API response."""
        return cls(
            f"failed to {operation}: HTTP {status_code}: {_preview(detail)}",
            status_code=status_code,
        )


class UnsupportedPlatformError(PlatformError):
    """Raised when no adapter is registered for a platform identifier."""

    def __init__(self, platform: str) -> None:
        """Record the unknown platform identifier."""
        self.platform = platform
        super().__init__(f"unsupported platform: {platform}")


class PayloadDecodeError(PlatformError):
    """Raised when a webhook body is not a JSON object."""

    @classmethod
    def invalid_json(cls, detail: str) -> PayloadDecodeError:
        """Return an error for a body that failed to decode as JSON."""
        return cls(f"webhook payload is not valid JSON: {detail}")

    @classmethod
    def not_an_object(cls, type_name: str) -> PayloadDecodeError:
        """Return an error for JSON whose top level is not an object."""
        return cls(f"webhook payload must be a JSON object, got {type_name}")


class AdapterConfigError(AdapterError):
    """Raised when a required credential is not configured."""

    @classmethod
    def missing_token(cls, platform: str) -> AdapterConfigError:
        """Return an error for a REST call made without an API token."""
        return cls(f"API token required for {platform} API calls")

    @classmethod
    def missing_webhook_secret(cls, platform: str) -> AdapterConfigError:
        """Return an error when signature checks are mandatory but unset."""
        return cls(f"webhook secret required for {platform} but not configured")

    @classmethod
    def invalid_value(cls, name: str, value: str) -> AdapterConfigError:
        """Return an error for an unparsable configuration value."""
        return cls(f"invalid value for {name}: {value!r}")


class RepoNotFoundError(AdapterError):
    """Raised when the platform reports the repository as missing.

    Attributes
    ----------
    owner
        Repository owner exactly as supplied by the caller.
    repo
        Repository name exactly as supplied by the caller.

    """

    def __init__(self, owner: str, repo: str) -> None:
        """Record the repository coordinates that could not be found."""
        self.owner = owner
        self.repo = repo
        super().__init__(f"repository not found: {owner}/{repo}")


class RateLimitedError(AdapterError):
    """Raised when the platform API rate limit has been exhausted.

    Attributes
    ----------
    retry_after
        Seconds the platform asked callers to wait, when it said.

    """

    def __init__(self, retry_after: int | None = None) -> None:
        """Record the optional ``Retry-After`` hint."""
        self.retry_after = retry_after
        message = "platform API rate limit exceeded"
        if retry_after is not None:
            message = f"{message}, retry after {retry_after}s"
        super().__init__(message)


__all__ = [
    "AdapterConfigError",
    "AdapterError",
    "PayloadDecodeError",
    "PlatformError",
    "RateLimitedError",
    "RepoNotFoundError",
    "UnsupportedPlatformError",
    "WebhookVerificationError",
]
