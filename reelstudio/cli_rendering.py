"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
speaker listings, and script measurements.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ActionError, StudioStageError
from .scripts.metrics import ScriptStats
from .voice.coqui_client import CoquiProviderError, user_friendly_error_message
from .voice.voices import Speaker


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, StudioStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    elif isinstance(exc, CoquiProviderError):
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
        typer.secho(f"Hint: {user_friendly_error_message(exc)}", fg=typer.colors.YELLOW, err=True)
    elif isinstance(exc, ActionError):
        typer.secho(f"{command_name} failed: {exc.message}", fg=typer.colors.RED, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_speaker_list(speakers: list[Speaker]) -> None:
    """Print one speaker per line, sorted by name."""

    for speaker in sorted(speakers, key=lambda item: item.name.lower()):
        typer.echo(f"{speaker.id}\t{speaker.language}")
    typer.echo(f"Speakers: {len(speakers)}")


def echo_script_stats(stats: ScriptStats) -> None:
    typer.echo(f"Words: {stats.word_count}")
    typer.echo(f"Estimated duration (s): {stats.estimated_duration_sec}")
