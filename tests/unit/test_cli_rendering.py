"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

import pytest
import typer

from reelstudio.cli_rendering import (
    echo_script_stats,
    echo_speaker_list,
    exit_with_command_error,
)
from reelstudio.errors import NotFoundError, StudioStageError
from reelstudio.scripts.metrics import ScriptStats
from reelstudio.voice.coqui_client import CoquiProviderError
from reelstudio.voice.voices import Speaker


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = StudioStageError(
        stage="config",
        detail="Config file not found: `missing.yml`.",
        hint="Provide an existing path via `--config <path.yaml>`.",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("speakers", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "speakers failed at stage `config`" in captured.err
    assert "Hint: Provide an existing path via `--config <path.yaml>`." in captured.err


def test_exit_with_command_error_adds_friendly_hint_for_provider_errors(
    capsys: pytest.CaptureFixture[str],
) -> None:
    error = CoquiProviderError("TTS API error: 503 Busy", failure_kind="server_error")

    with pytest.raises(typer.Exit):
        exit_with_command_error("tts", error)

    captured = capsys.readouterr()
    assert "tts failed: TTS API error: 503 Busy" in captured.err
    assert "Hint: The TTS service is experiencing issues." in captured.err


def test_exit_with_command_error_renders_action_and_fallback_errors(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Action errors print their message; anything else prints its text."""

    with pytest.raises(typer.Exit):
        exit_with_command_error("serve", NotFoundError("Project not found"))
    with pytest.raises(typer.Exit):
        exit_with_command_error("serve", RuntimeError("unexpected"))

    captured = capsys.readouterr()
    assert "serve failed: Project not found" in captured.err
    assert "serve failed: unexpected" in captured.err


def test_echo_speaker_list_sorts_by_name(capsys: pytest.CaptureFixture[str]) -> None:
    echo_speaker_list([Speaker.from_name("zoe"), Speaker.from_name("Ana Florence")])

    assert capsys.readouterr().out.splitlines() == [
        "Ana Florence\ten",
        "zoe\ten",
        "Speakers: 2",
    ]


def test_echo_script_stats(capsys: pytest.CaptureFixture[str]) -> None:
    echo_script_stats(ScriptStats(word_count=3, estimated_duration_sec=2))

    assert capsys.readouterr().out.splitlines() == [
        "Words: 3",
        "Estimated duration (s): 2",
    ]
