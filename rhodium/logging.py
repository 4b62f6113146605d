"""femtologging helpers shared by the gateway, stores, and CLI.

Every Rhodium module logs through a femtologging logger obtained with
:func:`get_logger`. Messages are percent-style templates; the ``log_*``
helpers interpolate them once and hand femtologging a finished string.

Example:
>>> from rhodium.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Accepted %s webhook for %s", "push", "octo/reef")

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Levels accepted by ``RHODIUM_LOG_LEVEL``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# Spellings operators commonly use for a canonical level.
_LEVEL_ALIASES: dict[str, LogLevel] = {
    "WARN": LogLevel.WARNING,
    "FATAL": LogLevel.CRITICAL,
}

DEFAULT_LOG_LEVEL = LogLevel.INFO


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Resolve ``level`` to a canonical :class:`LogLevel` name.

    Parameters
    ----------
    level : str | None
        Raw value, usually ``RHODIUM_LOG_LEVEL``. Case and surrounding
        whitespace are ignored, and ``WARN``/``FATAL`` are accepted as
        aliases.

    Returns
    -------
    tuple[str, bool]
        The canonical level name, and ``True`` when ``level`` was missing or
        unknown so :data:`DEFAULT_LOG_LEVEL` was used instead.

    """
    candidate = (level or "").strip().upper()
    if candidate in LogLevel.__members__:
        return (LogLevel[candidate].value, False)
    alias = _LEVEL_ALIASES.get(candidate)
    if alias is not None:
        return (alias.value, False)
    return (DEFAULT_LOG_LEVEL.value, True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Install the femtologging root handler at the resolved level.

    Returns the pair produced by :func:`normalize_log_level` so callers can
    warn about a rejected value once logging is live.
    """
    resolved, rejected = normalize_log_level(level)
    basicConfig(level=resolved, force=force)
    return (resolved, rejected)


def format_log_message(template: str, *args: object) -> str:
    """Apply ``args`` to ``template``; templates without args are literal."""
    return template % args if args else template


class _SupportsLog(typ.Protocol):
    """The slice of the femtologging logger API used here."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def log_at(
    logger: _SupportsLog,
    level: LogLevel,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Format ``template`` with ``args`` and log it at ``level``.

    Parameters
    ----------
    logger : _SupportsLog
        Destination logger.
    level : LogLevel
        Level of the record.
    template : str
        Percent-style message template.
    *args : object
        Values for the template placeholders.
    exc_info : object | None, optional
        Exception attached to the record.

    """
    logger.log(
        level.value,
        format_log_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(
    logger: _SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at DEBUG; see :func:`log_at`."""
    log_at(logger, LogLevel.DEBUG, template, *args, exc_info=exc_info)


def log_info(
    logger: _SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at INFO; see :func:`log_at`."""
    log_at(logger, LogLevel.INFO, template, *args, exc_info=exc_info)


def log_warning(
    logger: _SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at WARNING; see :func:`log_at`."""
    log_at(logger, LogLevel.WARNING, template, *args, exc_info=exc_info)


def log_error(
    logger: _SupportsLog, template: str, *args: object, exc_info: object | None = None
) -> None:
    """Log at ERROR; see :func:`log_at`."""
    log_at(logger, LogLevel.ERROR, template, *args, exc_info=exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log a literal ``message`` at ERROR with ``exc`` attached."""
    logger.log(LogLevel.ERROR.value, message, exc_info=exc, stack_info=False)


__all__ = [
    "DEFAULT_LOG_LEVEL",
    "LogLevel",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_at",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
