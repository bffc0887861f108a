"""Voice generation service behind the studio's voice routes.

Responsibilities:
- Validate synthesis and cloning requests.
- Forward requests to the voice API and persist returned audio.
- Return client-facing audio locations (signed, public, or inline data URLs).
"""

from __future__ import annotations

import io
import wave
from typing import Any

from ..errors import InvalidInputError
from ..io.object_store import ObjectStore, audio_data_url
from ..models.datatypes import AudioResponse, TTSRequest, VoiceCloneRequest
from ..parsing import normalize_optional_string
from ..telemetry.logger import EventLogger
from .coqui_client import CoquiClient
from .storage_paths import generate_audio_storage_path
from .voices import Speaker

ANONYMOUS_STORAGE_PATH = "temp://not-stored"
_WAV_CONTENT_TYPE = "audio/wav"
_STORAGE_IDENTITY_MESSAGE = "Either userId or sessionId is required for storage path generation"


def wav_duration_seconds(audio: bytes) -> float | None:
    """Return WAV duration in seconds, or `None` when the header is unreadable."""

    try:
        with wave.open(io.BytesIO(audio), "rb") as wav_file:
            frame_count = wav_file.getnframes()
            sample_rate = wav_file.getframerate()
    except (wave.Error, EOFError):
        return None
    if sample_rate <= 0:
        return None
    return frame_count / float(sample_rate)


class VoiceService:
    """Coordinate voice API calls with audio storage."""

    def __init__(
        self,
        client: CoquiClient,
        store: ObjectStore,
        logger: EventLogger,
        signed_url_ttl_seconds: int = 31_536_000,
    ) -> None:
        self.client = client
        self.store = store
        self.logger = logger
        self.signed_url_ttl_seconds = signed_url_ttl_seconds

    def list_speakers(self) -> list[Speaker]:
        return self.client.list_speakers()

    def health(self) -> dict[str, Any]:
        return self.client.health()

    def api_info(self) -> dict[str, Any]:
        return self.client.api_info()

    def synthesize_speech(self, request: TTSRequest) -> AudioResponse:
        """Synthesize stock-speaker audio.

        Anonymous sessions get an inline data URL and nothing is stored;
        signed-in users get the audio uploaded and a long-lived signed URL.
        """

        text = normalize_optional_string(request.text)
        speaker_id = normalize_optional_string(request.speaker_id)
        language = normalize_optional_string(request.language)
        if not text or not speaker_id or not language:
            raise InvalidInputError("Missing required fields: text, speaker_id, language")
        user_id = normalize_optional_string(request.user_id)
        session_id = normalize_optional_string(request.session_id)
        if not user_id and not session_id:
            raise InvalidInputError(_STORAGE_IDENTITY_MESSAGE)

        self.logger.info(
            "tts",
            "request",
            text_length=len(request.text or ""),
            speaker_id=speaker_id,
            language=language,
            has_user_id=bool(user_id),
            has_session_id=bool(session_id),
            has_project_id=bool(normalize_optional_string(request.project_id)),
        )
        audio = self.client.synthesize(
            text=request.text or "", speaker_id=speaker_id, language=language
        )
        duration = wav_duration_seconds(audio)
        self.logger.info("tts", "audio_received", size_bytes=len(audio))

        if not user_id:
            self.logger.info("tts", "inline_audio", size_bytes=len(audio))
            return AudioResponse(
                audio_url=audio_data_url(audio, _WAV_CONTENT_TYPE),
                storage_path=ANONYMOUS_STORAGE_PATH,
                duration_sec=duration,
            )

        storage_path = generate_audio_storage_path(user_id, request.project_id, session_id)
        self.store.upload(storage_path, audio, content_type=_WAV_CONTENT_TYPE, upsert=False)
        audio_url = self.store.create_signed_url(storage_path, self.signed_url_ttl_seconds)
        self.logger.info("tts", "stored", storage_path=storage_path, size_bytes=len(audio))
        return AudioResponse(audio_url=audio_url, storage_path=storage_path, duration_sec=duration)

    def clone_voice(self, request: VoiceCloneRequest) -> AudioResponse:
        """Synthesize audio in a reference voice and store it publicly."""

        text = normalize_optional_string(request.text)
        language = normalize_optional_string(request.language)
        if not text or not language or not request.reference_audio:
            raise InvalidInputError("Missing required fields: text, language, reference_audio")
        user_id = normalize_optional_string(request.user_id)
        session_id = normalize_optional_string(request.session_id)
        if not user_id and not session_id:
            raise InvalidInputError(_STORAGE_IDENTITY_MESSAGE)

        self.logger.info(
            "clone",
            "request",
            text_length=len(request.text or ""),
            language=language,
            reference_bytes=len(request.reference_audio),
        )
        audio = self.client.clone_voice(
            text=request.text or "",
            language=language,
            reference_audio=request.reference_audio,
            filename=request.reference_filename,
            content_type=request.reference_content_type,
        )
        storage_path = generate_audio_storage_path(user_id, request.project_id, session_id)
        self.store.upload(storage_path, audio, content_type=_WAV_CONTENT_TYPE, upsert=False)
        self.logger.info("clone", "stored", storage_path=storage_path, size_bytes=len(audio))
        return AudioResponse(
            audio_url=self.store.get_public_url(storage_path),
            storage_path=storage_path,
            duration_sec=wav_duration_seconds(audio),
        )
