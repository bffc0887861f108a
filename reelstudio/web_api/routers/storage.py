"""
Storage Router
==============
Serves bucket objects through public or signed URLs.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from reelstudio.config import StudioConfig
from reelstudio.io.object_store import ObjectStore
from reelstudio.telemetry.logger import EventLogger
from reelstudio.web_api.dependencies import get_config, get_logger, get_object_store

router = APIRouter()


@router.get("/{bucket}/{object_path:path}")
def get_object(
    bucket: str,
    object_path: str,
    expires: Optional[int] = None,
    token: Optional[str] = None,
    store: ObjectStore = Depends(get_object_store),
    config: StudioConfig = Depends(get_config),
    logger: EventLogger = Depends(get_logger),
):
    """
    Return object bytes.

    Requests carrying `token` must present a valid, unexpired signature;
    unsigned requests are only served when the bucket is public.
    """
    if bucket != store.bucket:
        raise HTTPException(status_code=404, detail="Bucket not found")
    if token is not None or expires is not None:
        if token is None or expires is None:
            raise HTTPException(status_code=403, detail="Invalid signature")
        if not store.verify_signature(object_path, expires, token):
            logger.warning("storage", "signature_rejected", bucket=bucket)
            raise HTTPException(status_code=403, detail="Invalid or expired signature")
    elif not config.storage_public:
        raise HTTPException(status_code=403, detail="Signed URL required")

    data, content_type = store.download(object_path)
    return Response(content=data, media_type=content_type)
