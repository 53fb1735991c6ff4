"""
File storage for uploads: a local directory by default, Cloudflare R2
(S3-compatible) when STORAGE_BACKEND=r2. Uses global config; no per-call
reconfiguration. Callers store the returned key as the row's file_path.
"""
import asyncio
import logging
from io import BytesIO
from pathlib import Path
from typing import FrozenSet, Optional
from uuid import uuid4

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from study_portal.config import settings
from study_portal.core.exceptions import BadRequestError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = frozenset({
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/markdown",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/avi",
    "video/x-msvideo",
    "video/quicktime",
    "video/x-ms-wmv",
    "text/javascript",
    "application/javascript",
    "text/html",
    "text/css",
    "application/json",
})

# Study materials also take audio recordings
MATERIAL_MIME_TYPES = ALLOWED_MIME_TYPES | frozenset({
    "audio/mpeg",
    "audio/mp4",
    "audio/wav",
    "audio/x-wav",
    "audio/ogg",
    "audio/webm",
})


def _too_large() -> BadRequestError:
    return BadRequestError(f"File too large. Maximum size is {settings.MAX_FILE_SIZE // (1024 * 1024)}MB")


def validate_upload(
    filename: Optional[str],
    content_type: Optional[str],
    size: int,
    allowed: FrozenSet[str] = ALLOWED_MIME_TYPES,
) -> None:
    """Reject empty, oversized or disallowed files with a 400."""
    if not filename:
        raise BadRequestError("No file provided")
    if size > settings.MAX_FILE_SIZE:
        raise _too_large()
    if (content_type or "").split(";")[0].strip().lower() not in allowed:
        raise BadRequestError("File type not allowed")


async def read_upload(file) -> bytes:
    """
    Read a multipart upload (Starlette UploadFile) into memory.

    Oversized files are refused from the declared size when the client sent
    one, otherwise after reading at most MAX_FILE_SIZE + 1 bytes.
    """
    limit = settings.MAX_FILE_SIZE
    if file.size is not None and file.size > limit:
        raise _too_large()
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise _too_large()
    return content


def _r2_client():
    if not settings.R2_ACCOUNT_ID or not settings.R2_ACCESS_KEY_ID or not settings.R2_SECRET_ACCESS_KEY:
        raise RuntimeError(
            "R2 storage not configured: set R2_ACCOUNT_ID, R2_ACCESS_KEY_ID, R2_SECRET_ACCESS_KEY"
        )
    return boto3.client(
        service_name="s3",
        endpoint_url=f"https://{settings.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
        aws_access_key_id=settings.R2_ACCESS_KEY_ID,
        aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY,
        region_name="auto",
        config=Config(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
    )


def _object_name(key_prefix: str, filename: str) -> str:
    ext = filename.rsplit(".", 1)[-1] if "." in filename else ""
    name = f"{uuid4().hex}.{ext}" if ext else uuid4().hex
    return f"{key_prefix.strip('/')}/{name}"


def _local_path(key: str) -> Path:
    root = Path(settings.UPLOAD_DIR).resolve()
    path = (root / key).resolve()
    if root not in path.parents:
        raise ValueError(f"Storage key escapes upload directory: {key}")
    return path


async def upload(
    key_prefix: str,
    filename: str,
    content: bytes,
    content_type: Optional[str] = None,
) -> str:
    """
    Store bytes and return the storage key.
    key_prefix: e.g. "documents/{user_id}" or "submissions/{assignment_id}"
    filename: original filename (only its extension is kept; a UUID names the object).
    """
    object_name = _object_name(key_prefix, filename)

    if settings.STORAGE_BACKEND == "r2":
        client = _r2_client()
        bucket = settings.R2_BUCKET_NAME
        extra = {"ContentType": content_type} if content_type else {}

        def _put():
            try:
                client.upload_fileobj(BytesIO(content), bucket, object_name, ExtraArgs=extra)
            except ClientError as e:
                raise RuntimeError(f"Storage upload failed: {e}") from e
    else:
        path = _local_path(object_name)

        def _put():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

    await asyncio.to_thread(_put)
    logger.info("Stored file", extra={"key": object_name, "size": len(content)})
    return object_name


async def delete(key: str) -> None:
    """Remove a stored object; missing objects are ignored."""
    if settings.STORAGE_BACKEND == "r2":
        client = _r2_client()

        def _remove():
            try:
                client.delete_object(Bucket=settings.R2_BUCKET_NAME, Key=key)
            except ClientError as e:
                raise RuntimeError(f"Storage delete failed: {e}") from e
    else:
        path = _local_path(key)

        def _remove():
            path.unlink(missing_ok=True)

    await asyncio.to_thread(_remove)
