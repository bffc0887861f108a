"""
Captions Router
===============
Plain-text rendering of ASS dialogue text for the script editor, plus
saving and signing the stored caption files.

Domain errors (400 / 401 / 403) are rendered by the app-level handler.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from reelstudio.captions.ass_text import ass_text_to_plain
from reelstudio.captions.files import CaptionFiles
from reelstudio.web_api.dependencies import get_caption_files, get_current_user_id
from reelstudio.web_api.schemas import CaptionTextBody, SaveCaptionBody, SignCaptionBody

router = APIRouter()


@router.post("/plain")
async def caption_plain_text(body: CaptionTextBody):
    """Strip override tags and expand `\\N` / `\\h` escapes."""
    return {"plain": ass_text_to_plain(body.text)}


@router.post("/save")
def save_caption_file(
    body: SaveCaptionBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    files: CaptionFiles = Depends(get_caption_files),
):
    """Overwrite the caption file and return a one-hour signed URL."""
    url, storage_path = files.save(user_id, body.storage_path, body.content)
    return {"assUrl": url, "assPath": storage_path}


@router.post("/sign")
def sign_caption_file(
    body: SignCaptionBody,
    user_id: Optional[str] = Depends(get_current_user_id),
    files: CaptionFiles = Depends(get_caption_files),
):
    return {"assUrl": files.sign(user_id, body.storage_path)}
