from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from eventdekho.core.limiter import limiter
from eventdekho.schemas import UploadOut
from eventdekho.services import storage_service

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("", response_model=UploadOut)
@limiter.limit("20/minute")
async def upload_file(request: Request, file: Optional[UploadFile] = File(None)):
    """
    Store one image or video and return its public URL.

    The URL is what event payloads carry in ``images`` / ``video``.
    """
    if file is None or not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        url, public_id = await storage_service.upload_media(file.file, file.filename, file.content_type)
    except storage_service.UnsupportedMediaType as e:
        raise HTTPException(status_code=400, detail=str(e))
    return UploadOut(url=url, public_id=public_id)
