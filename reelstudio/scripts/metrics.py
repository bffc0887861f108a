"""Word count and speaking-duration estimates for voiceover scripts."""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_WORDS_PER_MINUTE = 150


@dataclass(frozen=True, slots=True)
class ScriptStats:
    """Measured script size.

    Attributes:
        word_count: Whitespace-separated word count.
        estimated_duration_sec: Rounded-up speaking time in seconds.
    """

    word_count: int
    estimated_duration_sec: int


def count_words(text: str | None) -> int:
    """Count whitespace-separated words, treating blank text as empty."""

    stripped = (text or "").strip()
    if not stripped:
        return 0
    return len(stripped.split())


def estimate_duration_seconds(
    text: str | None, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
) -> int:
    """Estimate spoken duration in whole seconds at a fixed speaking rate."""

    if words_per_minute <= 0:
        raise ValueError("`words_per_minute` must be a positive integer.")
    return math.ceil(count_words(text) / words_per_minute * 60)


def script_stats(text: str | None) -> ScriptStats:
    return ScriptStats(
        word_count=count_words(text),
        estimated_duration_sec=estimate_duration_seconds(text),
    )
