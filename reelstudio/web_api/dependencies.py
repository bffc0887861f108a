"""
Request Dependencies
====================
Accessors for per-app services and the acting user.
"""
from typing import Optional

from fastapi import Header, Request

from reelstudio.captions.files import CaptionFiles
from reelstudio.config import StudioConfig
from reelstudio.io.object_store import ObjectStore
from reelstudio.projects.actions import ProjectActions
from reelstudio.projects.assets import AssetActions
from reelstudio.telemetry.logger import EventLogger
from reelstudio.voice.service import VoiceService


def get_config(request: Request) -> StudioConfig:
    return request.app.state.config


def get_logger(request: Request) -> EventLogger:
    return request.app.state.logger


def get_voice_service(request: Request) -> VoiceService:
    return request.app.state.voice_service


def get_project_actions(request: Request) -> ProjectActions:
    return request.app.state.project_actions


def get_asset_actions(request: Request) -> AssetActions:
    return request.app.state.asset_actions


def get_caption_files(request: Request) -> CaptionFiles:
    return request.app.state.caption_files


def get_object_store(request: Request) -> ObjectStore:
    return request.app.state.object_store


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> Optional[str]:
    """Signed-in user id as forwarded by the auth gateway, if any."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()
