"""
Assets Router
=============
Background asset library for the signed-in user.

Domain errors (400 / 401 / 404) are rendered by the app-level handler.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from reelstudio.models.datatypes import BackgroundAsset
from reelstudio.projects.assets import AssetActions
from reelstudio.web_api.dependencies import get_asset_actions, get_current_user_id
from reelstudio.web_api.schemas import UpdateAssetTagsBody

router = APIRouter()


def _asset_payload(actions: AssetActions, asset: BackgroundAsset) -> Optional[dict]:
    url = actions.signed_url(asset)
    if url is None:
        return None
    return {**asset.to_dict(), "public_url": url}


@router.get("")
def list_assets(
    tag: Optional[str] = None,
    limit: int = Query(default=50),
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: AssetActions = Depends(get_asset_actions),
):
    """
    List the user's assets, newest first.

    Assets whose stored object is missing are left out.
    """
    assets = actions.list_assets(user_id, tag, limit)
    payloads = [_asset_payload(actions, asset) for asset in assets]
    listed = [payload for payload in payloads if payload is not None]
    return {"assets": listed, "total": len(listed), "tag": tag}


@router.post("", status_code=201)
def upload_asset(
    title: Optional[str] = Form(default=None),
    tags: Optional[str] = Form(default=None),
    file: Optional[UploadFile] = File(default=None),
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: AssetActions = Depends(get_asset_actions),
):
    """Upload a background clip. `tags` is a comma-separated list."""
    data = file.file.read() if file is not None else None
    asset = actions.create_asset(
        user_id,
        title,
        file.filename if file is not None else None,
        data,
        content_type=(file.content_type if file is not None else None)
        or "application/octet-stream",
        tags=tags,
    )
    return {"success": True, "asset": {**asset.to_dict(), "public_url": actions.signed_url(asset)}}


@router.patch("/{asset_id}/tags")
def update_asset_tags(
    asset_id: str,
    body: UpdateAssetTagsBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: AssetActions = Depends(get_asset_actions),
):
    asset = actions.update_asset_tags(user_id, asset_id, body.tags)
    return {"success": True, "asset": asset.to_dict()}


@router.delete("/{asset_id}")
def delete_asset(
    asset_id: str,
    user_id: Optional[str] = Depends(get_current_user_id),
    actions: AssetActions = Depends(get_asset_actions),
):
    actions.delete_asset(user_id, asset_id)
    return {"success": True}
