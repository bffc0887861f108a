"""Stored ASS caption files edited in the studio.

Responsibilities:
- Restrict caption reads and writes to paths the signed-in user owns.
- Save edited caption text and issue short-lived signed URLs for it.
"""

from __future__ import annotations

from ..errors import ForbiddenError, InvalidInputError, UnauthorizedError
from ..io.object_store import ObjectStore
from ..parsing import normalize_optional_string
from ..projects.store import ProjectStore
from ..telemetry.logger import EventLogger

CAPTION_SIGNED_URL_TTL_SECONDS = 3600
_CAPTION_CONTENT_TYPE = "text/plain"
_ONEOFF_PREFIX = "projects/oneoff/"


class CaptionFiles:
    """Save and sign caption files under `projects/{user}/` or owned one-off folders."""

    def __init__(
        self,
        object_store: ObjectStore,
        project_store: ProjectStore,
        logger: EventLogger,
        signed_url_ttl_seconds: int = CAPTION_SIGNED_URL_TTL_SECONDS,
    ) -> None:
        self.object_store = object_store
        self.project_store = project_store
        self.logger = logger
        self.signed_url_ttl_seconds = signed_url_ttl_seconds

    def save(
        self, user_id: str | None, storage_path: str | None, content: str | None
    ) -> tuple[str, str]:
        """Overwrite the caption file and return `(signed_url, storage_path)`."""

        owner = self._require_user(user_id)
        if not normalize_optional_string(storage_path) or not content:
            raise InvalidInputError("storagePath and content are required")
        normalized = self._authorize(owner, storage_path or "")

        self.object_store.upload(
            normalized,
            content.encode("utf-8"),
            content_type=_CAPTION_CONTENT_TYPE,
            upsert=True,
        )
        self.logger.info("captions", "saved", storage_path=normalized, size_chars=len(content))
        url = self.object_store.create_signed_url(normalized, self.signed_url_ttl_seconds)
        return url, normalized

    def sign(self, user_id: str | None, storage_path: str | None) -> str:
        """Return a fresh signed URL for an existing caption file."""

        owner = self._require_user(user_id)
        if not normalize_optional_string(storage_path):
            raise InvalidInputError("storagePath is required")
        normalized = self._authorize(owner, storage_path or "")
        return self.object_store.create_signed_url(normalized, self.signed_url_ttl_seconds)

    def _authorize(self, owner: str, storage_path: str) -> str:
        """Return the normalized path when `owner` may access it.

        One-off paths are accepted only when their folder names a project
        owned by `owner`.
        """

        normalized = self.object_store.normalize_path(storage_path)
        if normalized.startswith(f"projects/{owner}/"):
            return normalized
        if normalized.startswith(_ONEOFF_PREFIX):
            parts = normalized.split("/")
            project = self.project_store.get_project(parts[2]) if len(parts) > 3 else None
            if project is not None and project.user_id == owner:
                return normalized
        self.logger.warning("captions", "path_rejected")
        raise ForbiddenError("Invalid storage path")

    @staticmethod
    def _require_user(user_id: str | None) -> str:
        owner = normalize_optional_string(user_id)
        if owner is None:
            raise UnauthorizedError("Authentication required")
        return owner
