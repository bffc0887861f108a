"""Shared pytest fixtures for the full Reel Studio test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from reelstudio.config import StudioConfig
from tests.voice_fakes import MockRequestsResponse, build_wav_bytes, json_response

VoiceCall = tuple[str, str, dict[str, object]]


@pytest.fixture
def wav_bytes() -> bytes:
    """A 0.1 second silent WAV payload."""

    return build_wav_bytes()


@pytest.fixture
def studio_config(tmp_path: Path) -> StudioConfig:
    """Config rooted in a temporary data directory."""

    return StudioConfig(
        coqui_api_base_url="https://voice.test",
        data_dir=tmp_path / "data",
        public_base_url="https://studio.test",
        signing_secret="test-secret",
        voice_timeout_seconds=5.0,
        voice_max_retries=3,
        voice_retry_backoff_seconds=0.5,
    )


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Capture retry backoff durations without waiting."""

    sleeps: list[float] = []
    monkeypatch.setattr("reelstudio.voice.coqui_client.time.sleep", sleeps.append)
    return sleeps


@pytest.fixture
def mock_voice_api(
    monkeypatch: pytest.MonkeyPatch, wav_bytes: bytes
) -> Callable[..., list[VoiceCall]]:
    """Route `requests.get`/`requests.post` to canned voice API responses.

    The returned installer takes `{(method, path): outcome}` overrides, where an
    outcome is a response, an exception, or a list consumed one per call. It
    returns the list of recorded `(method, url, kwargs)` calls.
    """

    def _install(routes: dict[tuple[str, str], object] | None = None) -> list[VoiceCall]:
        calls: list[VoiceCall] = []
        table: dict[tuple[str, str], object] = {
            ("GET", "/speakers"): json_response(
                {"speakers": ["Ana Florence", "Claribel Dervla"], "count": 2}
            ),
            ("GET", "/health"): json_response({"gpu": "available"}),
            ("GET", "/api-info"): json_response({"name": "coqui", "version": "2"}),
            ("POST", "/tts"): MockRequestsResponse(payload=wav_bytes),
            ("POST", "/voice-clone"): MockRequestsResponse(payload=wav_bytes),
        }
        table.update(routes or {})

        def _dispatch(method: str, url: str, kwargs: dict[str, object]) -> object:
            calls.append((method, url, kwargs))
            path = "/" + url.split("://", 1)[-1].split("/", 1)[-1]
            outcome = table[(method, path)]
            if isinstance(outcome, list):
                outcome = outcome.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        monkeypatch.setattr(
            "reelstudio.voice.coqui_client.requests.get",
            lambda url, **kwargs: _dispatch("GET", url, kwargs),
        )
        monkeypatch.setattr(
            "reelstudio.voice.coqui_client.requests.post",
            lambda url, **kwargs: _dispatch("POST", url, kwargs),
        )
        return calls

    return _install
