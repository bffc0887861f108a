"""
Projects Router
===============
Dashboard and workspace CRUD for the signed-in user's projects.

Domain errors (401 / 404 / 400) are rendered by the app-level handler.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from reelstudio.projects.actions import ProjectActions
from reelstudio.web_api.dependencies import get_current_user_id, get_project_actions
from reelstudio.web_api.schemas import (
    CreateProjectBody,
    SaveAudioAssetBody,
    SaveScriptBody,
    SaveVideoAssetBody,
)

router = APIRouter()


@router.get("")
def list_projects(
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    projects = actions.list_projects(user_id)
    return {"projects": [project.to_dict() for project in projects]}


@router.post("", status_code=201)
def create_project(
    body: CreateProjectBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    project = actions.create_project(user_id, body.title)
    return {"success": True, "project": project.to_dict()}


@router.get("/{project_id}")
def get_project_details(
    project_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    """Project with its latest script, audio, and video."""
    return actions.get_project_details(user_id, project_id).to_dict()


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    actions.delete_project(user_id, project_id)
    return {"success": True}


@router.post("/{project_id}/script")
def save_script(
    project_id: str,
    body: SaveScriptBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    script = actions.save_script(user_id, project_id, body.text)
    return {"success": True, "script": script.to_dict()}


@router.post("/{project_id}/audio")
def save_audio_asset(
    project_id: str,
    body: SaveAudioAssetBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    asset = actions.save_audio_asset(
        user_id,
        project_id,
        body.mode,
        body.speaker_id,
        body.storage_path,
        body.duration_sec,
    )
    return {"success": True, "asset": asset.to_dict()}


@router.post("/{project_id}/video")
def save_video_asset(
    project_id: str,
    body: SaveVideoAssetBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: ProjectActions = Depends(get_project_actions),
):
    asset = actions.save_video_asset(
        user_id, project_id, body.storage_path, body.background_asset_id
    )
    return {"success": True, "asset": asset.to_dict()}
