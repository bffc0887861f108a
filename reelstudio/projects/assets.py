"""Background asset library for the signed-in user.

Responsibilities:
- Upload background clips and music beds into the object bucket.
- Keep asset records and stored objects consistent on create and delete.
- Hand out signed URLs for listing the library.
"""

from __future__ import annotations

import re
import time

from ..errors import InvalidInputError, NotFoundError, PersistenceError, UnauthorizedError
from ..io.object_store import ObjectStore
from ..models.datatypes import BackgroundAsset
from ..parsing import normalize_optional_string, parse_csv_list
from ..telemetry.logger import EventLogger
from .store import ProjectStore

_UNSAFE_NAME_CHARACTERS = re.compile(r"[^a-zA-Z0-9_-]")
_MAX_NAME_LENGTH = 50
_DEFAULT_EXTENSION = "mp4"


def background_storage_path(user_id: str, filename: str, now_ms: int | None = None) -> str:
    """Return `backgrounds/{user}/{ts}_{name}.{ext}` with a sanitized file name."""

    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    stem, dot, extension = filename.rpartition(".")
    if not dot or not stem:
        stem, extension = filename, ""
    extension = extension.lower() or _DEFAULT_EXTENSION
    safe_stem = _UNSAFE_NAME_CHARACTERS.sub("_", stem)[:_MAX_NAME_LENGTH] or "asset"
    safe_extension = _UNSAFE_NAME_CHARACTERS.sub("_", extension)
    return f"backgrounds/{user_id}/{timestamp}_{safe_stem}.{safe_extension}"


class AssetActions:
    """User-scoped background asset operations."""

    def __init__(
        self,
        store: ProjectStore,
        object_store: ObjectStore,
        logger: EventLogger,
        signed_url_ttl_seconds: int = 31_536_000,
    ) -> None:
        self.store = store
        self.object_store = object_store
        self.logger = logger
        self.signed_url_ttl_seconds = signed_url_ttl_seconds

    def list_assets(
        self, user_id: str | None, tag: str | None = None, limit: int = 50
    ) -> list[BackgroundAsset]:
        owner = self._require_user(user_id, "Authentication required to list assets")
        if limit <= 0:
            raise InvalidInputError("`limit` must be a positive integer.")
        return self.store.list_background_assets(owner, normalize_optional_string(tag))[:limit]

    def create_asset(
        self,
        user_id: str | None,
        title: str | None,
        filename: str | None,
        data: bytes | None,
        content_type: str = "application/octet-stream",
        tags: str | None = None,
        now_ms: int | None = None,
    ) -> BackgroundAsset:
        """Upload `data` and record it; the upload is removed if the record cannot be saved."""

        owner = self._require_user(user_id, "Unauthorized")
        normalized_title = normalize_optional_string(title)
        normalized_name = normalize_optional_string(filename)
        if normalized_title is None or normalized_name is None or not data:
            raise InvalidInputError("Title and file are required")

        storage_path = background_storage_path(owner, normalized_name, now_ms)
        self.object_store.upload(storage_path, data, content_type=content_type, upsert=False)
        try:
            asset = self.store.insert_background_asset(
                owner, normalized_title, storage_path, parse_csv_list(tags)
            )
        except PersistenceError as exc:
            self.object_store.remove(storage_path)
            self.logger.failure("assets", exc, storage_path=storage_path)
            raise
        self.logger.info("assets", "created", asset_id=asset.id, size_bytes=len(data))
        return asset

    def delete_asset(self, user_id: str | None, asset_id: str) -> None:
        asset = self._owned_asset(user_id, asset_id)
        self.object_store.remove(asset.storage_path)
        self.store.delete_background_asset(asset.id, asset.user_id)
        self.logger.info("assets", "deleted", asset_id=asset.id)

    def update_asset_tags(
        self, user_id: str | None, asset_id: str, tags: list[str]
    ) -> BackgroundAsset:
        asset = self._owned_asset(user_id, asset_id)
        cleaned = [tag for tag in (normalize_optional_string(item) for item in tags) if tag]
        updated = self.store.update_background_asset_tags(asset.id, asset.user_id, cleaned)
        if updated is None:
            raise NotFoundError("Asset not found")
        self.logger.info("assets", "tags_updated", asset_id=asset.id, tag_count=len(cleaned))
        return updated

    def signed_url(self, asset: BackgroundAsset) -> str | None:
        """Return a signed URL, or `None` when the stored object is gone."""

        try:
            return self.object_store.create_signed_url(
                asset.storage_path, self.signed_url_ttl_seconds
            )
        except NotFoundError:
            self.logger.warning("assets", "object_missing", asset_id=asset.id)
            return None

    def _owned_asset(self, user_id: str | None, asset_id: str) -> BackgroundAsset:
        owner = self._require_user(user_id, "Unauthorized")
        asset = self.store.get_background_asset(asset_id, owner)
        if asset is None:
            raise NotFoundError("Asset not found")
        return asset

    @staticmethod
    def _require_user(user_id: str | None, message: str) -> str:
        owner = normalize_optional_string(user_id)
        if owner is None:
            raise UnauthorizedError(message)
        return owner
