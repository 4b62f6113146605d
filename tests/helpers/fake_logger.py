"""Logger double that records femtologging-style ``log`` calls."""

from __future__ import annotations

import dataclasses


@dataclasses.dataclass(slots=True)
class LogCall:
    """One recorded log call."""

    level: str
    message: str
    exc_info: object | None = None
    stack_info: bool = False


class FakeLogger:
    """Collect log calls for assertions.

    Swap it in for a module-level ``logger`` with ``monkeypatch.setattr``.
    """

    def __init__(self) -> None:
        self.calls: list[LogCall] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str:
        """Record the call and echo the message as femtologging does."""
        self.calls.append(LogCall(level, message, exc_info, stack_info))
        return message

    def messages(self, level: str | None = None) -> list[str]:
        """Return recorded messages, optionally filtered by level."""
        return [
            call.message
            for call in self.calls
            if level is None or call.level == level
        ]
