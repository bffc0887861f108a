"""Command-line interface for Reel Studio.

Responsibilities:
- Expose caption and script helpers for local use.
- Query and exercise the voice API without running the server.
- Run the HTTP API with uvicorn.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import uvicorn

from .captions.ass_text import ass_text_to_plain
from .cli_rendering import echo_script_stats, echo_speaker_list, exit_with_command_error
from .config import ConfigLoader, StudioConfig
from .errors import StudioStageError
from .scripts.metrics import script_stats
from .voice.coqui_client import CoquiClient
from .voice.service import wav_duration_seconds
from .web_api.main import create_app

app = typer.Typer(
    name="reelstudio",
    no_args_is_help=True,
    help="Reel Studio CLI.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file; defaults to environment."),
]


def _load_config(config_path: Path | None) -> StudioConfig:
    """Load YAML or environment config and map failures to stage errors."""

    if config_path is None:
        try:
            return ConfigLoader.from_env()
        except ValueError as exc:
            raise StudioStageError(
                stage="config",
                detail=str(exc),
                hint="Fix the `REELSTUDIO_*` / `COQUI_API_BASE_URL` environment values.",
            ) from exc

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise StudioStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise StudioStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _read_text_input(text: str | None, file: Path | None) -> str:
    """Return text from exactly one of the positional argument or `--file`."""

    if (text is None) == (file is None):
        raise StudioStageError(
            stage="input",
            detail="Provide exactly one input source: `TEXT` or `--file <path>`.",
        )
    if file is None:
        return text or ""
    try:
        return file.read_text(encoding="utf-8")
    except OSError as exc:
        raise StudioStageError(
            stage="input",
            detail=f"Failed to read `{file}`: {exc}",
        ) from exc


def _voice_client(config: StudioConfig) -> CoquiClient:
    return CoquiClient(
        config.coqui_api_base_url,
        timeout_seconds=config.voice_timeout_seconds,
        max_retries=config.voice_max_retries,
        retry_backoff_base_seconds=config.voice_retry_backoff_seconds,
    )


@app.command("plain")
def plain_command(
    text: Annotated[str | None, typer.Argument(help="ASS dialogue text.")] = None,
    file: Annotated[
        Path | None, typer.Option("--file", help="Read ASS dialogue text from a file.")
    ] = None,
) -> None:
    """Print ASS dialogue text as plain editor text."""

    try:
        source = _read_text_input(text, file)
    except Exception as exc:
        exit_with_command_error("plain", exc)

    typer.echo(ass_text_to_plain(source))


@app.command("script-stats")
def script_stats_command(
    text: Annotated[str | None, typer.Argument(help="Script text.")] = None,
    file: Annotated[
        Path | None, typer.Option("--file", help="Read the script from a file.")
    ] = None,
) -> None:
    """Print word count and estimated speaking duration."""

    try:
        source = _read_text_input(text, file)
    except Exception as exc:
        exit_with_command_error("script-stats", exc)

    echo_script_stats(script_stats(source))


@app.command("speakers")
def speakers_command(config_file: ConfigOption = None) -> None:
    """List stock speakers from the voice API."""

    try:
        speakers = _voice_client(_load_config(config_file)).list_speakers()
    except Exception as exc:
        exit_with_command_error("speakers", exc)

    echo_speaker_list(speakers)


@app.command("voice-health")
def voice_health_command(config_file: ConfigOption = None) -> None:
    """Check that the voice API is reachable."""

    try:
        payload = _voice_client(_load_config(config_file)).health()
    except Exception as exc:
        exit_with_command_error("voice-health", exc)

    typer.echo("Voice API: healthy")
    for key in sorted(payload):
        typer.echo(f"{key}: {payload[key]}")


@app.command("tts")
def tts_command(
    text: Annotated[str, typer.Argument(help="Text to synthesize.")],
    speaker: Annotated[str, typer.Option("--speaker", help="Stock speaker id.")],
    out: Annotated[Path, typer.Option("--out", help="Output WAV path.")],
    language: Annotated[str, typer.Option("--language", help="Language code.")] = "en",
    config_file: ConfigOption = None,
) -> None:
    """Synthesize text with a stock speaker and write a WAV file."""

    try:
        client = _voice_client(_load_config(config_file))
        audio = client.synthesize(text=text, speaker_id=speaker, language=language)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_bytes(audio)
    except Exception as exc:
        exit_with_command_error("tts", exc)

    typer.echo(f"Audio: {out}")
    duration = wav_duration_seconds(audio)
    if duration is None:
        typer.echo("Duration (s): unknown")
    else:
        typer.echo(f"Duration (s): {duration:.2f}")


@app.command("serve")
def serve_command(
    host: Annotated[str | None, typer.Option("--host", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Bind port.")] = None,
    config_file: ConfigOption = None,
) -> None:
    """Run the studio HTTP API."""

    try:
        config = _load_config(config_file)
        overrides: dict[str, object] = {}
        if host is not None:
            overrides["host"] = host
        if port is not None:
            overrides["port"] = port
        if overrides:
            config = config.with_overrides(**overrides)
        api = create_app(config)
    except Exception as exc:
        exit_with_command_error("serve", exc)

    uvicorn.run(api, host=config.host, port=config.port)


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
