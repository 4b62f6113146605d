"""Unit tests for webhook ingestion log events."""

from __future__ import annotations

import datetime as dt

import pytest
from sqlalchemy.exc import OperationalError

from rhodium.adapters.errors import (
    AdapterConfigError,
    PayloadDecodeError,
    PlatformError,
    RateLimitedError,
    UnsupportedPlatformError,
    WebhookVerificationError,
)
from rhodium.ingestion.observability import (
    ErrorCategory,
    WebhookEventLogger,
    WebhookEventType,
    categorize_error,
)
from rhodium.storage.errors import CacheConnectionError
from tests.helpers.fake_logger import FakeLogger


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> FakeLogger:
    """Replace the observability module logger."""
    fake = FakeLogger()
    monkeypatch.setattr("rhodium.ingestion.observability.logger", fake)
    return fake


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (WebhookVerificationError.signature_mismatch(), ErrorCategory.VERIFICATION),
        (PayloadDecodeError.not_an_object("list"), ErrorCategory.MALFORMED_PAYLOAD),
        (PlatformError.unsupported_event_type("fork"), ErrorCategory.UNSUPPORTED),
        (UnsupportedPlatformError("gitlab"), ErrorCategory.UNSUPPORTED),
        (AdapterConfigError.missing_token("github"), ErrorCategory.CONFIGURATION),
        (RateLimitedError(10), ErrorCategory.RATE_LIMITED),
        (CacheConnectionError.for_command("LPUSH"), ErrorCategory.STORAGE),
        (
            OperationalError("INSERT", {}, Exception("disk full")),
            ErrorCategory.STORAGE,
        ),
        (KeyError("boom"), ErrorCategory.UNKNOWN),
    ],
)
def test_categorize_error(error: BaseException, expected: ErrorCategory) -> None:
    """Exceptions map to the most specific category."""
    assert categorize_error(error) is expected, (
        f"Unexpected category for {type(error).__name__}."
    )


def test_log_received(fake_logger: FakeLogger) -> None:
    """Arrivals log at INFO with the payload size."""
    WebhookEventLogger().log_received("github", 512)

    assert fake_logger.messages("INFO") == [
        "[webhook.received] platform=github payload_bytes=512"
    ], "Unexpected received event."


def test_log_accepted(fake_logger: FakeLogger) -> None:
    """Accepted webhooks log at INFO with their identifiers."""
    WebhookEventLogger().log_accepted(
        "github", "push", "push", "octo/reef", "7", dt.timedelta(milliseconds=1500)
    )

    (message,) = fake_logger.messages("INFO")
    assert message.startswith(f"[{WebhookEventType.ACCEPTED}]"), "Unexpected tag."
    assert "repo_slug=octo/reef" in message, "Expected the repository."
    assert "event_id=7" in message, "Expected the stored identifier."
    assert "duration_seconds=1.500" in message, "Expected the duration."


def test_sender_fault_logs_rejection_warning(fake_logger: FakeLogger) -> None:
    """Verification failures are rejections logged at WARNING."""
    error = WebhookVerificationError.signature_mismatch()

    WebhookEventLogger().log_failed("github", None, error, dt.timedelta(0))

    (call,) = fake_logger.calls
    assert call.level == "WARNING", "Expected WARNING."
    assert call.message.startswith("[webhook.rejected]"), "Expected rejection tag."
    assert "error_category=verification" in call.message
    assert "event_type=None" in call.message
    assert call.exc_info is None, "Rejections carry no traceback."


def test_server_fault_logs_error_with_exception(fake_logger: FakeLogger) -> None:
    """Storage failures log at ERROR with the exception attached."""
    error = CacheConnectionError.for_command("LPUSH")

    WebhookEventLogger().log_failed("github", "push", error, dt.timedelta(0))

    (call,) = fake_logger.calls
    assert call.level == "ERROR", "Expected ERROR."
    assert call.message.startswith("[webhook.failed]"), "Expected failure tag."
    assert "error_type=CacheConnectionError" in call.message
    assert "error_category=storage" in call.message
    assert call.exc_info is error, "Expected the exception attached."
