"""JSON-backed persistence for projects, their child records, and background assets."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Iterable, TypeVar
from uuid import uuid4

from ..errors import InvalidInputError, PersistenceError
from ..models.datatypes import (
    PROJECT_STATUSES,
    AudioAsset,
    BackgroundAsset,
    Project,
    ScriptVersion,
    VideoAsset,
)

_CHILD_TABLES = ("script_versions", "audio_assets", "video_assets")
_TABLES = ("projects", *_CHILD_TABLES, "background_assets")
_RecordT = TypeVar("_RecordT")
_Tables = dict[str, dict[str, dict[str, Any]]]


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds").replace("+00:00", "Z")


class ProjectStore:
    """Simple JSON-backed store for projects, scripts, and media assets.

    Deleting a project removes its script versions and assets as well.
    Every change is staged on a copy of the tables and only becomes visible
    once it has been written to disk.
    """

    def __init__(
        self,
        path: Path,
        clock: Callable[[], str] = _utc_now,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self._path = path
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.Lock()
        self._data: _Tables = {table: {} for table in _TABLES}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        if self._path.exists():
            self._load()
        else:
            self._save(self._data)

    def _load(self) -> None:
        with self._path.open("r", encoding="utf-8") as handle:
            loaded = json.load(handle)
        for table in _TABLES:
            self._data[table] = dict(loaded.get(table, {}))

    def _save(self, data: _Tables) -> None:
        tmp_path = self._path.with_suffix(".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, ensure_ascii=False)
            tmp_path.replace(self._path)
        except OSError as exc:
            raise PersistenceError(f"Failed to write project store: {exc}") from exc

    def _commit(self, change: Callable[[_Tables], None]) -> None:
        """Apply `change` to a staged copy and swap it in after a successful write.

        Callers must hold `self._lock`. Rows are replaced, never mutated in place.
        """

        staged = {table: dict(rows) for table, rows in self._data.items()}
        change(staged)
        self._save(staged)
        self._data = staged

    def insert_project(self, user_id: str, title: str, status: str = "draft") -> Project:
        if status not in PROJECT_STATUSES:
            raise InvalidInputError(f"Unsupported project status `{status}`.")
        with self._lock:
            project = Project(
                id=self._id_factory(),
                user_id=user_id,
                title=title,
                status=status,
                created_at=self._clock(),
            )
            self._commit(self._put("projects", project.id, project.to_dict()))
            return project

    def get_project(self, project_id: str) -> Project | None:
        with self._lock:
            payload = self._data["projects"].get(project_id)
            return Project.from_dict(payload) if payload is not None else None

    def list_projects(self, user_id: str) -> list[Project]:
        """Return the user's projects, newest first."""

        with self._lock:
            rows = [
                payload
                for payload in self._data["projects"].values()
                if payload.get("user_id") == user_id
            ]
        return [Project.from_dict(row) for row in self._newest_first(rows)]

    def delete_project(self, project_id: str, user_id: str) -> bool:
        """Delete an owned project and its children; return whether one was removed."""

        def _remove(data: _Tables) -> None:
            del data["projects"][project_id]
            for table in _CHILD_TABLES:
                data[table] = {
                    record_id: row
                    for record_id, row in data[table].items()
                    if row.get("project_id") != project_id
                }

        with self._lock:
            payload = self._data["projects"].get(project_id)
            if payload is None or payload.get("user_id") != user_id:
                return False
            self._commit(_remove)
            return True

    def insert_script_version(
        self, project_id: str, text: str, estimated_duration_sec: int | None
    ) -> ScriptVersion:
        return self._insert_record(
            "script_versions",
            lambda record_id, created_at: ScriptVersion(
                id=record_id,
                project_id=project_id,
                text=text,
                estimated_duration_sec=estimated_duration_sec,
                created_at=created_at,
            ),
        )

    def insert_audio_asset(
        self,
        project_id: str,
        mode: str,
        speaker_id: str | None,
        storage_path: str,
        duration_sec: float | None,
    ) -> AudioAsset:
        return self._insert_record(
            "audio_assets",
            lambda record_id, created_at: AudioAsset(
                id=record_id,
                project_id=project_id,
                mode=mode,
                speaker_id=speaker_id,
                storage_path=storage_path,
                duration_sec=duration_sec,
                created_at=created_at,
            ),
        )

    def insert_video_asset(
        self, project_id: str, storage_path: str, background_asset_id: str | None
    ) -> VideoAsset:
        return self._insert_record(
            "video_assets",
            lambda record_id, created_at: VideoAsset(
                id=record_id,
                project_id=project_id,
                storage_path=storage_path,
                background_asset_id=background_asset_id,
                created_at=created_at,
            ),
        )

    def latest_script(self, project_id: str) -> ScriptVersion | None:
        return self._latest_child("script_versions", project_id, ScriptVersion.from_dict)

    def latest_audio(self, project_id: str) -> AudioAsset | None:
        return self._latest_child("audio_assets", project_id, AudioAsset.from_dict)

    def latest_video(self, project_id: str) -> VideoAsset | None:
        return self._latest_child("video_assets", project_id, VideoAsset.from_dict)

    def insert_background_asset(
        self, user_id: str, title: str, storage_path: str, tags: list[str]
    ) -> BackgroundAsset:
        return self._insert_record(
            "background_assets",
            lambda record_id, created_at: BackgroundAsset(
                id=record_id,
                user_id=user_id,
                title=title,
                storage_path=storage_path,
                tags=tuple(tags),
                created_at=created_at,
            ),
        )

    def get_background_asset(self, asset_id: str, user_id: str) -> BackgroundAsset | None:
        """Return the asset only when `user_id` owns it."""

        with self._lock:
            payload = self._data["background_assets"].get(asset_id)
        if payload is None or payload.get("user_id") != user_id:
            return None
        return BackgroundAsset.from_dict(payload)

    def list_background_assets(
        self, user_id: str, tag: str | None = None
    ) -> list[BackgroundAsset]:
        """Return the user's background assets, newest first, optionally by tag."""

        with self._lock:
            rows = [
                payload
                for payload in self._data["background_assets"].values()
                if payload.get("user_id") == user_id
                and (tag is None or tag in payload.get("tags", []))
            ]
        return [BackgroundAsset.from_dict(row) for row in self._newest_first(rows)]

    def delete_background_asset(self, asset_id: str, user_id: str) -> bool:
        with self._lock:
            payload = self._data["background_assets"].get(asset_id)
            if payload is None or payload.get("user_id") != user_id:
                return False
            self._commit(lambda data: data["background_assets"].pop(asset_id))
            return True

    def update_background_asset_tags(
        self, asset_id: str, user_id: str, tags: list[str]
    ) -> BackgroundAsset | None:
        with self._lock:
            payload = self._data["background_assets"].get(asset_id)
            if payload is None or payload.get("user_id") != user_id:
                return None
            updated = {**payload, "tags": list(tags)}
            self._commit(self._put("background_assets", asset_id, updated))
            return BackgroundAsset.from_dict(updated)

    def _insert_record(
        self, table: str, build: Callable[[str, str], _RecordT]
    ) -> _RecordT:
        with self._lock:
            record = build(self._id_factory(), self._clock())
            payload = record.to_dict()  # type: ignore[attr-defined]
            self._commit(self._put(table, payload["id"], payload))
            return record

    def _latest_child(
        self,
        table: str,
        project_id: str,
        decode: Callable[[dict[str, Any]], _RecordT],
    ) -> _RecordT | None:
        with self._lock:
            rows = [
                row for row in self._data[table].values() if row.get("project_id") == project_id
            ]
        ordered = self._newest_first(rows)
        return decode(ordered[0]) if ordered else None

    @staticmethod
    def _put(table: str, record_id: str, row: dict[str, Any]) -> Callable[[_Tables], None]:
        def _apply(data: _Tables) -> None:
            data[table][record_id] = row

        return _apply

    @staticmethod
    def _newest_first(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
        indexed = list(enumerate(rows))
        indexed.sort(key=lambda item: (str(item[1].get("created_at", "")), item[0]), reverse=True)
        return [row for _, row in indexed]
