"""
Media uploads to S3-compatible object storage.
"""
import os
import uuid
from typing import BinaryIO, Optional, Tuple

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from eventdekho.core.config import settings
from eventdekho.core.errors import IntegrationError
from eventdekho.core.logging import logger

MEDIA_FOLDER = "events_media"
ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "mp4", "mov"}


class UnsupportedMediaType(ValueError):
    pass


def file_extension(filename: Optional[str]) -> str:
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def check_extension(filename: Optional[str]) -> str:
    ext = file_extension(filename)
    if ext not in ALLOWED_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS))
        raise UnsupportedMediaType(f"Unsupported file type. Allowed: {allowed}")
    return ext


def _client():
    return boto3.client(
        "s3",
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        region_name=settings.S3_REGION,
        endpoint_url=settings.S3_ENDPOINT_URL,
        config=Config(signature_version="s3v4"),
    )


def public_url(key: str) -> str:
    if settings.MEDIA_BASE_URL:
        return f"{settings.MEDIA_BASE_URL.rstrip('/')}/{key}"
    return f"https://{settings.S3_BUCKET}.s3.{settings.S3_REGION}.amazonaws.com/{key}"


def _put_object(fileobj: BinaryIO, key: str, content_type: Optional[str]) -> None:
    extra = {"ContentType": content_type} if content_type else {}
    _client().upload_fileobj(fileobj, settings.S3_BUCKET, key, ExtraArgs=extra)


async def upload_media(fileobj: BinaryIO, filename: str, content_type: Optional[str] = None) -> Tuple[str, str]:
    """
    Store an uploaded file under ``events_media/``.

    Returns:
        (public URL, public id) where the public id is the key without extension

    Raises:
        UnsupportedMediaType: If the extension is not an allowed image/video type
        IntegrationError: If storage is not configured or the upload fails
    """
    ext = check_extension(filename)
    if not settings.S3_BUCKET:
        raise IntegrationError("Upload failed", "S3_BUCKET is not set")

    public_id = f"{MEDIA_FOLDER}/{uuid.uuid4().hex}"
    key = f"{public_id}.{ext}"
    try:
        await run_in_threadpool(_put_object, fileobj, key, content_type)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Upload of {filename} to {settings.S3_BUCKET}/{key} failed: {e}")
        raise IntegrationError("Upload failed", str(e))

    logger.info(f"Uploaded {filename} to {settings.S3_BUCKET}/{key}")
    return public_url(key), public_id
