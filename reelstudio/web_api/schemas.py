"""
Request Schemas
===============
Request bodies for the voice, project, asset and caption endpoints.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class TTSBody(BaseModel):
    """Stock-speaker synthesis request. Required fields are checked by the service."""

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = None
    speaker_id: Optional[str] = None
    language: Optional[str] = None
    project_id: Optional[str] = Field(default=None, alias="projectId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class CaptionTextBody(BaseModel):
    """ASS dialogue text to convert for the editor."""

    text: Optional[str] = None


class CreateProjectBody(BaseModel):
    title: Optional[str] = None


class SaveScriptBody(BaseModel):
    text: str = Field(..., description="Full script text")


class SaveAudioAssetBody(BaseModel):
    """Reference to generated audio already stored in the bucket."""

    mode: str = Field(..., description="`speaker` or `clone`")
    speaker_id: Optional[str] = None
    storage_path: str
    duration_sec: Optional[float] = None


class SaveVideoAssetBody(BaseModel):
    storage_path: str
    background_asset_id: Optional[str] = None


class SaveCaptionBody(BaseModel):
    """Edited ASS file content. Required fields are checked by the service."""

    model_config = ConfigDict(populate_by_name=True)

    storage_path: Optional[str] = Field(default=None, alias="storagePath")
    content: Optional[str] = None


class SignCaptionBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    storage_path: Optional[str] = Field(default=None, alias="storagePath")


class UpdateAssetTagsBody(BaseModel):
    tags: list[str] = Field(default_factory=list)
