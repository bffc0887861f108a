"""Telemetry and observability helpers."""

from .logger import EventLogger, format_event_line

__all__ = ["EventLogger", "format_event_line"]
