"""Core datatypes shared across studio modules.

Responsibilities:
- Represent immutable project records persisted by the project store.
- Represent voice API request/response payloads exchanged with the web layer.

Key types:
- `Project`, `ScriptVersion`, `AudioAsset`, `VideoAsset`, `BackgroundAsset`, `ProjectDetails`.
- `TTSRequest`, `VoiceCloneRequest`, `AudioResponse`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

PROJECT_STATUSES = frozenset({"draft", "processing", "ready"})
AUDIO_MODES = frozenset({"speaker", "clone"})


@dataclass(frozen=True, slots=True)
class Project:
    """A user-owned video project.

    Attributes:
        id: Project identifier.
        user_id: Owning user identifier.
        title: Human-readable project title.
        status: One of `draft`, `processing`, `ready`.
        created_at: ISO-8601 UTC creation timestamp.
    """

    id: str
    user_id: str
    title: str
    status: str
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Project:
        return cls(
            id=str(payload["id"]),
            user_id=str(payload["user_id"]),
            title=str(payload["title"]),
            status=str(payload.get("status", "draft")),
            created_at=str(payload["created_at"]),
        )


@dataclass(frozen=True, slots=True)
class ScriptVersion:
    """One saved revision of a project's voiceover script."""

    id: str
    project_id: str
    text: str
    estimated_duration_sec: int | None
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ScriptVersion:
        duration = payload.get("estimated_duration_sec")
        return cls(
            id=str(payload["id"]),
            project_id=str(payload["project_id"]),
            text=str(payload["text"]),
            estimated_duration_sec=int(duration) if duration is not None else None,
            created_at=str(payload["created_at"]),
        )


@dataclass(frozen=True, slots=True)
class AudioAsset:
    """Generated voiceover audio stored in the object bucket.

    Attributes:
        mode: `speaker` for stock voices, `clone` for reference-audio cloning.
        speaker_id: Stock speaker name, `None` for cloned audio.
        storage_path: Object path inside the bucket.
        duration_sec: Audio length when known.
    """

    id: str
    project_id: str
    mode: str
    speaker_id: str | None
    storage_path: str
    duration_sec: float | None
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AudioAsset:
        duration = payload.get("duration_sec")
        speaker_id = payload.get("speaker_id")
        return cls(
            id=str(payload["id"]),
            project_id=str(payload["project_id"]),
            mode=str(payload["mode"]),
            speaker_id=str(speaker_id) if speaker_id is not None else None,
            storage_path=str(payload["storage_path"]),
            duration_sec=float(duration) if duration is not None else None,
            created_at=str(payload["created_at"]),
        )


@dataclass(frozen=True, slots=True)
class VideoAsset:
    """Rendered video stored in the object bucket."""

    id: str
    project_id: str
    storage_path: str
    background_asset_id: str | None
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> VideoAsset:
        background = payload.get("background_asset_id")
        return cls(
            id=str(payload["id"]),
            project_id=str(payload["project_id"]),
            storage_path=str(payload["storage_path"]),
            background_asset_id=str(background) if background is not None else None,
            created_at=str(payload["created_at"]),
        )


@dataclass(frozen=True, slots=True)
class BackgroundAsset:
    """User-owned background clip or music bed that videos can reference.

    Attributes:
        user_id: Owning user identifier.
        title: Human-readable asset title.
        storage_path: Object path inside the bucket.
        tags: Free-form labels used to filter the asset library.
    """

    id: str
    user_id: str
    title: str
    storage_path: str
    tags: tuple[str, ...]
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["tags"] = list(self.tags)
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> BackgroundAsset:
        return cls(
            id=str(payload["id"]),
            user_id=str(payload["user_id"]),
            title=str(payload["title"]),
            storage_path=str(payload["storage_path"]),
            tags=tuple(str(tag) for tag in payload.get("tags") or ()),
            created_at=str(payload["created_at"]),
        )


@dataclass(frozen=True, slots=True)
class ProjectDetails:
    """A project with its latest script, audio, and video records."""

    project: Project
    script: ScriptVersion | None = None
    audio: AudioAsset | None = None
    video: VideoAsset | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project.to_dict(),
            "script": self.script.to_dict() if self.script else None,
            "audio": self.audio.to_dict() if self.audio else None,
            "video": self.video.to_dict() if self.video else None,
        }


@dataclass(frozen=True, slots=True)
class TTSRequest:
    """Stock-speaker synthesis request.

    Either `user_id` (stored audio) or `session_id` (one-off studio) must be set.
    """

    text: str | None
    speaker_id: str | None
    language: str | None
    project_id: str | None = None
    user_id: str | None = None
    session_id: str | None = None


@dataclass(frozen=True, slots=True)
class VoiceCloneRequest:
    """Reference-audio cloning request."""

    text: str | None
    language: str | None
    reference_audio: bytes | None
    reference_filename: str = "reference.wav"
    reference_content_type: str = "audio/wav"
    project_id: str | None = None
    user_id: str | None = None
    session_id: str | None = None


@dataclass(frozen=True, slots=True)
class AudioResponse:
    """Location of generated audio returned to the client."""

    audio_url: str
    storage_path: str
    duration_sec: float | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase JSON payload consumed by the studio frontend."""

        return {
            "audioUrl": self.audio_url,
            "storagePath": self.storage_path,
            "durationSec": self.duration_sec,
        }
