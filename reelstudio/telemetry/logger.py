"""Structured event logging utilities.

Responsibilities:
- Emit concise, deterministic event lines for actions and voice API calls.
- Keep secrets and audio payloads out of log context; log sizes and flags only.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


def format_event_line(level: str, event: str, stage: str, **context: object) -> str:
    """Render one event line without emitting it."""

    return f"[event] level={level} stage={stage} event={event}{_format_context(context)}"


class EventLogger:
    """Emit deterministic event logs for studio actions and provider calls."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Route loguru output to `sink` with a bare message format."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        _loguru_logger.log(level, format_event_line(level, event, stage, **context))

    def info(self, stage: str, event: str, **context: object) -> None:
        self._emit("INFO", event, stage, **context)

    def warning(self, stage: str, event: str, **context: object) -> None:
        self._emit("WARNING", event, stage, **context)

    def failure(self, stage: str, error: BaseException, **context: object) -> None:
        """Emit a failure event naming the error type, never its payload."""

        self._emit("ERROR", "failure", stage, error_type=type(error).__name__, **context)
