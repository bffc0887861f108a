"""Voice API integration.

This package contains the Coqui API client, speaker models, audio storage
paths, and the service used by the voice routes.
"""

from .coqui_client import CoquiClient, CoquiProviderError, user_friendly_error_message
from .service import VoiceService, wav_duration_seconds
from .storage_paths import generate_audio_storage_path
from .voices import Speaker

__all__ = [
    "CoquiClient",
    "CoquiProviderError",
    "Speaker",
    "VoiceService",
    "generate_audio_storage_path",
    "user_friendly_error_message",
    "wav_duration_seconds",
]
