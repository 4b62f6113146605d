"""Unit tests for the femtologging helpers in ``rhodium.logging``."""

from __future__ import annotations

import pytest

from rhodium.logging import (
    LogLevel,
    configure_logging,
    format_log_message,
    log_at,
    log_debug,
    log_error,
    log_exception,
    log_info,
    log_warning,
    normalize_log_level,
)
from tests.helpers.fake_logger import FakeLogger, LogCall


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("debug", ("DEBUG", False)),
        ("  warn ", ("WARNING", False)),
        ("fatal", ("CRITICAL", False)),
        ("Critical", ("CRITICAL", False)),
        (None, ("INFO", True)),
        ("", ("INFO", True)),
        ("verbose", ("INFO", True)),
    ],
)
def test_normalize_log_level(raw: str | None, expected: tuple[str, bool]) -> None:
    """Known levels are upper-cased; anything else falls back to INFO."""
    assert normalize_log_level(raw) == expected, (
        f"Expected {raw!r} to normalize to {expected}."
    )


def test_format_log_message_without_args_leaves_percent_signs() -> None:
    """A template without arguments is returned untouched."""
    assert format_log_message("100% done") == "100% done", (
        "Templates without args must not be interpolated."
    )


def test_format_log_message_interpolates_args() -> None:
    """Percent placeholders are filled from the positional arguments."""
    message = format_log_message("%s webhook for %s", "push", "octo/reef")
    assert message == "push webhook for octo/reef", "Expected percent formatting."


@pytest.mark.parametrize(
    ("emit", "level"),
    [
        (log_debug, "DEBUG"),
        (log_info, "INFO"),
        (log_warning, "WARNING"),
        (log_error, "ERROR"),
    ],
)
def test_level_helpers_emit_formatted_messages(
    emit: object, level: str
) -> None:
    """Each helper logs at its level with stack_info disabled."""
    logger = FakeLogger()

    emit(logger, "store %s answered in %dms", "cache", 3)  # type: ignore[operator]

    assert logger.calls == [LogCall(level, "store cache answered in 3ms")], (
        f"Expected one {level} entry."
    )


def test_log_warning_forwards_exc_info() -> None:
    """exc_info reaches the logger unchanged."""
    logger = FakeLogger()
    exc = ConnectionError("redis down")

    log_warning(logger, "Store %s failed its health check", "cache", exc_info=exc)

    assert logger.calls[0].exc_info is exc, "Expected exc_info to be forwarded."


def test_log_exception_attaches_exception() -> None:
    """log_exception logs at ERROR with the exception attached."""
    logger = FakeLogger()
    exc = RuntimeError("boom")

    log_exception(logger, "ingestion failed", exc)

    assert logger.calls == [LogCall("ERROR", "ingestion failed", exc)], (
        "Expected ERROR entry carrying the exception."
    )


@pytest.mark.parametrize(
    ("raw", "expected_level", "expected_invalid"),
    [("trace", "TRACE", False), ("loud", "INFO", True)],
)
def test_configure_logging_calls_basic_config(
    monkeypatch: pytest.MonkeyPatch,
    raw: str,
    expected_level: str,
    *,
    expected_invalid: bool,
) -> None:
    """configure_logging passes the normalized level to femtologging."""
    captured: dict[str, object] = {}

    def fake_basic_config(**kwargs: object) -> None:
        captured.update(kwargs)

    monkeypatch.setattr("rhodium.logging.basicConfig", fake_basic_config)

    result = configure_logging(raw, force=True)

    assert result == (expected_level, expected_invalid), (
        f"Unexpected normalization result for {raw!r}."
    )
    assert captured == {"level": expected_level, "force": True}, (
        "Expected basicConfig to receive the normalized level and force flag."
    )


def test_log_at_uses_the_level_value() -> None:
    """log_at sends the canonical level name to the logger."""
    logger = FakeLogger()

    log_at(logger, LogLevel.CRITICAL, "queue %s is stalled", "webhook-events")

    assert logger.calls == [LogCall("CRITICAL", "queue webhook-events is stalled")], (
        "Expected one CRITICAL entry."
    )
