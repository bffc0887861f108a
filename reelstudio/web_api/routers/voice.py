"""
Voice Router
============
Proxies the studio's voice requests to the Coqui TTS API.

Read endpoints (health, speakers, api-info) degrade to 503 responses;
synthesis failures return 500 with a user-facing message.
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from reelstudio.errors import InvalidInputError
from reelstudio.models.datatypes import TTSRequest, VoiceCloneRequest
from reelstudio.telemetry.logger import EventLogger
from reelstudio.voice.coqui_client import user_friendly_error_message
from reelstudio.voice.service import VoiceService
from reelstudio.web_api.dependencies import get_logger, get_voice_service
from reelstudio.web_api.schemas import TTSBody

router = APIRouter()


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def voice_health(
    service: VoiceService = Depends(get_voice_service),
    logger: EventLogger = Depends(get_logger),
):
    """Report whether the upstream TTS API is reachable."""
    try:
        data = service.health()
    except Exception as exc:
        logger.failure("voice_health", exc)
        return JSONResponse(
            status_code=503,
            content={
                "status": "down",
                "timestamp": _timestamp(),
                "error": user_friendly_error_message(exc),
            },
        )
    return {"status": "healthy", "timestamp": _timestamp(), **data}


@router.get("/speakers")
def list_speakers(
    service: VoiceService = Depends(get_voice_service),
    logger: EventLogger = Depends(get_logger),
):
    """List stock speakers available for synthesis."""
    try:
        speakers = service.list_speakers()
    except Exception as exc:
        logger.failure("voice_speakers", exc)
        return JSONResponse(
            status_code=503,
            content={"error": user_friendly_error_message(exc), "speakers": []},
        )
    return [speaker.to_dict() for speaker in speakers]


@router.get("/api-info")
def api_info(
    service: VoiceService = Depends(get_voice_service),
    logger: EventLogger = Depends(get_logger),
):
    try:
        return service.api_info()
    except Exception as exc:
        logger.failure("voice_api_info", exc)
        return JSONResponse(status_code=503, content={"error": user_friendly_error_message(exc)})


@router.post("/tts")
def text_to_speech(
    body: TTSBody,
    service: VoiceService = Depends(get_voice_service),
    logger: EventLogger = Depends(get_logger),
):
    """
    Synthesize `text` with a stock speaker.

    Returns `audioUrl`, `storagePath` and `durationSec`.
    """
    request = TTSRequest(
        text=body.text,
        speaker_id=body.speaker_id,
        language=body.language,
        project_id=body.project_id,
        user_id=body.user_id,
        session_id=body.session_id,
    )
    try:
        response = service.synthesize_speech(request)
    except InvalidInputError:
        raise
    except Exception as exc:
        logger.failure("tts", exc)
        return JSONResponse(status_code=500, content={"error": user_friendly_error_message(exc)})
    return response.to_payload()


@router.post("/clone")
def clone_voice(
    text: Optional[str] = Form(default=None),
    language: Optional[str] = Form(default=None),
    reference_audio: Optional[UploadFile] = File(default=None),
    projectId: Optional[str] = Form(default=None),
    userId: Optional[str] = Form(default=None),
    sessionId: Optional[str] = Form(default=None),
    service: VoiceService = Depends(get_voice_service),
    logger: EventLogger = Depends(get_logger),
):
    """Synthesize `text` in the voice of the uploaded reference audio."""
    reference_bytes = reference_audio.file.read() if reference_audio is not None else None
    request = VoiceCloneRequest(
        text=text,
        language=language,
        reference_audio=reference_bytes,
        reference_filename=(reference_audio.filename if reference_audio else None)
        or "reference.wav",
        reference_content_type=(reference_audio.content_type if reference_audio else None)
        or "audio/wav",
        project_id=projectId,
        user_id=userId,
        session_id=sessionId,
    )
    try:
        response = service.clone_voice(request)
    except InvalidInputError:
        raise
    except Exception as exc:
        logger.failure("clone", exc)
        return JSONResponse(status_code=500, content={"error": user_friendly_error_message(exc)})
    return response.to_payload()
