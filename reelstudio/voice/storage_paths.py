"""Object paths for generated audio."""

from __future__ import annotations

import time

from ..parsing import normalize_optional_string


def generate_audio_storage_path(
    user_id: str | None,
    project_id: str | None,
    session_id: str | None,
    now_ms: int | None = None,
) -> str:
    """Return the bucket path for a new WAV file.

    Signed-in users with a project get `projects/{user}/{project}/audio/{ts}.wav`;
    one-off studio sessions get `projects/oneoff/{session}/audio/{ts}.wav`; with
    neither, a synthetic `session-{ts}` folder is used.
    """

    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    user = normalize_optional_string(user_id)
    project = normalize_optional_string(project_id)
    session = normalize_optional_string(session_id)

    if user and project:
        return f"projects/{user}/{project}/audio/{timestamp}.wav"
    if session:
        return f"projects/oneoff/{session}/audio/{timestamp}.wav"
    return f"projects/oneoff/session-{timestamp}/audio/{timestamp}.wav"
