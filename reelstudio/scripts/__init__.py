"""Script text measurements."""

from .metrics import ScriptStats, count_words, estimate_duration_seconds, script_stats

__all__ = ["ScriptStats", "count_words", "estimate_duration_seconds", "script_stats"]
