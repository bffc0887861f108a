"""Project CRUD actions for the dashboard and project workspace.

Responsibilities:
- Enforce sign-in and ownership for every project read and write.
- Validate user input before it reaches the project store.
- Derive script duration estimates when scripts are saved.

Key types:
- `ProjectActions`: action facade used by the HTTP routes.
"""

from __future__ import annotations

from ..errors import InvalidInputError, NotFoundError, UnauthorizedError
from ..models.datatypes import (
    AUDIO_MODES,
    AudioAsset,
    Project,
    ProjectDetails,
    ScriptVersion,
    VideoAsset,
)
from ..parsing import normalize_optional_string
from ..scripts.metrics import estimate_duration_seconds
from ..telemetry.logger import EventLogger
from .store import ProjectStore


class ProjectActions:
    """User-scoped project operations backed by a `ProjectStore`."""

    def __init__(self, store: ProjectStore, logger: EventLogger) -> None:
        self.store = store
        self.logger = logger

    def create_project(self, user_id: str | None, title: str | None) -> Project:
        """Create a draft project titled with the stripped `title`."""

        normalized_title = normalize_optional_string(title)
        if normalized_title is None:
            raise InvalidInputError("Project title is required")
        owner = self._require_user(user_id, "You must be logged in to create a project")

        project = self.store.insert_project(owner, normalized_title, status="draft")
        self.logger.info("projects", "created", project_id=project.id)
        return project

    def delete_project(self, user_id: str | None, project_id: str) -> None:
        """Delete an owned project together with its scripts and assets."""

        owner = self._require_user(user_id, "You must be logged in")
        if not self.store.delete_project(project_id, owner):
            raise NotFoundError("Project not found")
        self.logger.info("projects", "deleted", project_id=project_id)

    def list_projects(self, user_id: str | None) -> list[Project]:
        owner = self._require_user(user_id, "You must be logged in")
        return self.store.list_projects(owner)

    def get_project_details(self, user_id: str | None, project_id: str) -> ProjectDetails:
        """Return the project with its latest script, audio, and video."""

        project = self._owned_project(user_id, project_id)
        return ProjectDetails(
            project=project,
            script=self.store.latest_script(project.id),
            audio=self.store.latest_audio(project.id),
            video=self.store.latest_video(project.id),
        )

    def save_script(self, user_id: str | None, project_id: str, text: str) -> ScriptVersion:
        project = self._owned_project(user_id, project_id)
        script = self.store.insert_script_version(
            project.id, text, estimate_duration_seconds(text)
        )
        self.logger.info(
            "projects",
            "script_saved",
            project_id=project.id,
            estimated_duration_sec=script.estimated_duration_sec,
        )
        return script

    def save_audio_asset(
        self,
        user_id: str | None,
        project_id: str,
        mode: str,
        speaker_id: str | None,
        storage_path: str,
        duration_sec: float | None,
    ) -> AudioAsset:
        if mode not in AUDIO_MODES:
            supported = ", ".join(sorted(AUDIO_MODES))
            raise InvalidInputError(f"Unsupported audio mode `{mode}`; supported: {supported}.")
        normalized_path = normalize_optional_string(storage_path)
        if normalized_path is None:
            raise InvalidInputError("Audio storage path is required")
        project = self._owned_project(user_id, project_id)

        asset = self.store.insert_audio_asset(
            project.id,
            mode,
            normalize_optional_string(speaker_id),
            normalized_path,
            duration_sec,
        )
        self.logger.info("projects", "audio_saved", project_id=project.id, mode=mode)
        return asset

    def save_video_asset(
        self,
        user_id: str | None,
        project_id: str,
        storage_path: str,
        background_asset_id: str | None = None,
    ) -> VideoAsset:
        normalized_path = normalize_optional_string(storage_path)
        if normalized_path is None:
            raise InvalidInputError("Video storage path is required")
        project = self._owned_project(user_id, project_id)
        background_id = normalize_optional_string(background_asset_id)
        if background_id is not None and (
            self.store.get_background_asset(background_id, project.user_id) is None
        ):
            raise NotFoundError("Background asset not found")

        asset = self.store.insert_video_asset(project.id, normalized_path, background_id)
        self.logger.info("projects", "video_saved", project_id=project.id)
        return asset

    def _owned_project(self, user_id: str | None, project_id: str) -> Project:
        owner = self._require_user(user_id, "Unauthorized")
        project = self.store.get_project(project_id)
        if project is None or project.user_id != owner:
            raise NotFoundError("Project not found")
        return project

    @staticmethod
    def _require_user(user_id: str | None, message: str) -> str:
        owner = normalize_optional_string(user_id)
        if owner is None:
            raise UnauthorizedError(message)
        return owner
