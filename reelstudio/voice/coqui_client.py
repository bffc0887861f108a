"""HTTP client for the external Coqui TTS inference API.

Responsibilities:
- Read speaker, health, and API-info endpoints with bounded retries.
- Send synthesis and voice-cloning requests exactly once, without a timeout.
- Raise provider exceptions classified for user-facing error mapping.
"""

from __future__ import annotations

import socket
import time
from typing import Any

import requests

from .voices import Speaker


class CoquiProviderError(RuntimeError):
    """Raised when a voice API request fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        """Initialize provider error metadata for user-facing diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code


_FRIENDLY_MESSAGES = {
    "timeout": "Request timed out. The TTS service may be busy. Please try again.",
    "exhausted": "Unable to connect to the TTS service. Please try again in a moment.",
    "client_error": "Invalid request. Please check your input and try again.",
    "server_error": "The TTS service is experiencing issues. Please try again later.",
}
_DEFAULT_FRIENDLY_MESSAGE = "Failed to generate audio. Please try again."


def user_friendly_error_message(error: BaseException) -> str:
    """Map a provider failure to a message safe to show end users."""

    if isinstance(error, CoquiProviderError):
        return _FRIENDLY_MESSAGES.get(error.failure_kind, _DEFAULT_FRIENDLY_MESSAGE)
    return _DEFAULT_FRIENDLY_MESSAGE


class CoquiClient:
    """Minimal requests-based client for the Coqui TTS API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 30.0,
        max_retries: int = 3,
        retry_backoff_base_seconds: float = 1.0,
    ) -> None:
        """Initialize client settings and retry policy."""

        if max_retries <= 0:
            raise ValueError("`max_retries` must be a positive integer.")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.retry_backoff_base_seconds = retry_backoff_base_seconds
        self.retry_attempt_count = 0

    def list_speakers(self) -> list[Speaker]:
        """Return stock speakers, accepting both `{"speakers": [...]}` and bare lists."""

        payload = self._get_json("/speakers")
        if isinstance(payload, dict) and isinstance(payload.get("speakers"), list):
            names = payload["speakers"]
        elif isinstance(payload, list):
            names = payload
        else:
            raise CoquiProviderError(
                "Invalid response format: expected speakers array",
                failure_kind="invalid_payload",
            )
        return [Speaker.from_name(str(name)) for name in names]

    def health(self) -> dict[str, Any]:
        return self._get_json_object("/health")

    def api_info(self) -> dict[str, Any]:
        return self._get_json_object("/api-info")

    def synthesize(self, *, text: str, speaker_id: str, language: str) -> bytes:
        """Return WAV bytes for `text` spoken by a stock speaker."""

        response = self._post_once(
            "/tts",
            json={"text": text, "speaker_id": speaker_id, "language": language},
        )
        return self._require_audio(response)

    def clone_voice(
        self,
        *,
        text: str,
        language: str,
        reference_audio: bytes,
        filename: str = "reference.wav",
        content_type: str = "audio/wav",
    ) -> bytes:
        """Return WAV bytes for `text` spoken in the reference speaker's voice."""

        response = self._post_once(
            "/voice-clone",
            data={"text": text, "language": language},
            files={"reference_audio": (filename, reference_audio, content_type)},
        )
        return self._require_audio(response)

    def _get_json_object(self, path: str) -> dict[str, Any]:
        payload = self._get_json(path)
        if not isinstance(payload, dict):
            raise CoquiProviderError(
                f"Invalid response format from `{path}`: expected JSON object",
                failure_kind="invalid_payload",
            )
        return payload

    def _get_json(self, path: str) -> Any:
        response = self._get_with_retry(path)
        try:
            return response.json()
        except ValueError as exc:
            raise CoquiProviderError(
                f"Voice API returned invalid JSON from `{path}`.",
                failure_kind="invalid_payload",
            ) from exc

    def _get_with_retry(self, path: str) -> requests.Response:
        """GET with exponential backoff; client errors are never retried."""

        url = f"{self.base_url}{path}"
        last_error: CoquiProviderError | None = None
        for attempt in range(self.max_retries):
            try:
                response = requests.get(url, timeout=self.timeout_seconds)
            except requests.RequestException as exc:
                last_error = CoquiProviderError(
                    self._transport_detail(exc),
                    failure_kind=self._classify_transport_failure(exc),
                )
            else:
                if response.ok:
                    return response
                status_code = response.status_code
                if 400 <= status_code < 500:
                    raise CoquiProviderError(
                        f"Client error: {status_code} {response.reason}",
                        failure_kind="client_error",
                        status_code=status_code,
                    )
                last_error = CoquiProviderError(
                    f"Server error: {status_code} {response.reason}",
                    failure_kind="server_error",
                    status_code=status_code,
                )

            if attempt < self.max_retries - 1:
                self.retry_attempt_count += 1
                time.sleep(self.retry_backoff_base_seconds * (2**attempt))

        detail = str(last_error) if last_error is not None else "Unknown error"
        timed_out = last_error is not None and last_error.failure_kind == "timeout"
        raise CoquiProviderError(
            f"Failed to call voice API after {self.max_retries} attempts: {detail}",
            failure_kind="timeout" if timed_out else "exhausted",
            status_code=last_error.status_code if last_error is not None else None,
        ) from last_error

    def _post_once(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> requests.Response:
        """POST once with no timeout; synthesis can legitimately take minutes."""

        url = f"{self.base_url}{path}"
        try:
            response = requests.post(url, json=json, data=data, files=files, timeout=None)
        except requests.RequestException as exc:
            raise CoquiProviderError(
                self._transport_detail(exc),
                failure_kind=self._classify_transport_failure(exc),
            ) from exc

        if not response.ok:
            status_code = response.status_code
            raise CoquiProviderError(
                f"TTS API error: {status_code} {response.reason}",
                failure_kind="client_error" if status_code < 500 else "server_error",
                status_code=status_code,
            )
        return response

    @staticmethod
    def _require_audio(response: requests.Response) -> bytes:
        audio = bytes(response.content)
        if not audio:
            raise CoquiProviderError(
                "Voice API returned an empty audio payload.",
                failure_kind="invalid_payload",
            )
        return audio

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into diagnostic kinds."""

        if isinstance(reason, TimeoutError | socket.timeout | requests.Timeout):
            return "timeout"
        return "transport"

    @classmethod
    def _transport_detail(cls, exc: requests.RequestException) -> str:
        if cls._classify_transport_failure(exc) == "timeout":
            return "Voice API request timeout."
        return f"Voice API transport error: {' '.join(str(exc).split())}"
