"""Image uploads for the admin panel."""

from __future__ import annotations

import secrets
import time
from pathlib import Path
from typing import Dict, Optional, Tuple

from fastapi import UploadFile, status

from portfolio_cms.core.logging_config import get_logger
from portfolio_cms.core.models.io.operations import UploadResult
from portfolio_cms.server.core.config import settings

logger = get_logger(__name__)

IMAGE_SUBDIR = "images"
CHUNK_SIZE = 64 * 1024

# content type -> (extension, accepted leading bytes)
ALLOWED_TYPES: Dict[str, Tuple[str, Tuple[bytes, ...]]] = {
    "image/jpeg": (".jpg", (b"\xff\xd8\xff",)),
    "image/jpg": (".jpg", (b"\xff\xd8\xff",)),
    "image/png": (".png", (b"\x89PNG\r\n\x1a\n",)),
    "image/gif": (".gif", (b"GIF87a", b"GIF89a")),
    "image/webp": (".webp", (b"RIFF",)),
}


class UploadError(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _matches_signature(content_type: str, head: bytes) -> bool:
    _, signatures = ALLOWED_TYPES[content_type]
    if not any(head.startswith(signature) for signature in signatures):
        return False
    if content_type == "image/webp":
        return head[8:12] == b"WEBP"
    return True


async def save_image(
    file: UploadFile, upload_dir: Optional[str] = None, max_bytes: Optional[int] = None
) -> UploadResult:
    """
    Validate and store an uploaded image.

    The declared content type must be JPEG, PNG, WebP or GIF and the file's
    leading bytes must match it. Files are stored as
    ``<ms-timestamp>-<random><ext>`` under ``<upload_dir>/images``.

    Raises:
        UploadError: 400 for empty or unsupported files, 413 when over ``max_bytes``.
    """
    max_bytes = max_bytes if max_bytes is not None else settings.upload_max_bytes
    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_TYPES:
        raise UploadError("Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed.")

    data = bytearray()
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        data.extend(chunk)
        if len(data) > max_bytes:
            raise UploadError(
                f"File size too large. Maximum {max_bytes // (1024 * 1024)}MB allowed.",
                status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            )

    if not data:
        raise UploadError("No file provided")
    if not _matches_signature(content_type, bytes(data[:16])):
        raise UploadError("File content does not match its declared image type")

    extension, _ = ALLOWED_TYPES[content_type]
    filename = f"{int(time.time() * 1000)}-{secrets.token_hex(6)}{extension}"
    target_dir = Path(upload_dir or settings.upload_dir) / IMAGE_SUBDIR
    target_dir.mkdir(parents=True, exist_ok=True)
    (target_dir / filename).write_bytes(bytes(data))

    logger.info(f"Stored uploaded image {filename} ({len(data)} bytes) from '{file.filename}'")
    return UploadResult(
        filename=filename,
        url=f"/uploads/{IMAGE_SUBDIR}/{filename}",
        size=len(data),
        type="image/jpeg" if content_type == "image/jpg" else content_type,
    )
