"""Typed records for projects and voice requests."""

from .datatypes import (
    AUDIO_MODES,
    PROJECT_STATUSES,
    AudioAsset,
    AudioResponse,
    BackgroundAsset,
    Project,
    ProjectDetails,
    ScriptVersion,
    TTSRequest,
    VideoAsset,
    VoiceCloneRequest,
)

__all__ = [
    "AUDIO_MODES",
    "PROJECT_STATUSES",
    "Project",
    "ScriptVersion",
    "AudioAsset",
    "VideoAsset",
    "BackgroundAsset",
    "ProjectDetails",
    "TTSRequest",
    "VoiceCloneRequest",
    "AudioResponse",
]
