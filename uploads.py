"""
Image and PDF uploads, kept in a GridFS bucket and served back from /files.
"""
import logging
import mimetypes
import random
import re
import string
import time
from typing import Optional, Tuple

import gridfs

from config import settings

logger = logging.getLogger(__name__)

PDF_TYPE = "application/pdf"


class UploadRejected(ValueError):
    def __init__(self, message: str, status_code: int = 415):
        super().__init__(message)
        self.status_code = status_code


def check_upload(content_type: Optional[str], size: int, max_bytes: Optional[int] = None,
                 images_only: bool = False) -> None:
    content_type = content_type or ""
    is_image = content_type.startswith("image/")
    if images_only and not is_image:
        raise UploadRejected("Only images are allowed.")
    if not is_image and content_type != PDF_TYPE:
        raise UploadRejected("Only image or PDF files are allowed.")
    if max_bytes and size > max_bytes:
        raise UploadRejected(f"File too large (max {max_bytes // (1024 * 1024)}MB).", status_code=413)


def storage_name(original: str, now_ms: Optional[int] = None) -> str:
    """`<epoch ms>-<sanitized name, 20 chars>.<ext>`"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    ext = original.rsplit(".", 1)[-1] if original else ""
    sanitized = re.sub(r"[^a-zA-Z0-9]", "_", original or "")[:20]
    return f"{now_ms}-{sanitized}.{ext}"


def public_url(name: str) -> str:
    return f"{settings.public_base_url}/files/{name}"


def store_file(bucket: gridfs.GridFSBucket, original: str, data: bytes, content_type: str) -> str:
    name = storage_name(original)
    bucket.upload_from_stream(name, data, metadata={"contentType": content_type, "original": original})
    logger.info("Stored upload %s (%d bytes)", name, len(data))
    return public_url(name)


def open_file(bucket: gridfs.GridFSBucket, name: str) -> Tuple[bytes, str]:
    """Return (data, content type); raises gridfs.NoFile when missing."""
    stream = bucket.open_download_stream_by_name(name)
    metadata = stream.metadata or {}
    content_type = metadata.get("contentType") or mimetypes.guess_type(name)[0] or "application/octet-stream"
    return stream.read(), content_type


def new_photo_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"p-{int(time.time() * 1000)}-{suffix}"


def photo_from_upload(original: str, url: str) -> dict:
    return {
        "id": new_photo_id(),
        "src": url,
        "alt": (original or "").split(".")[0] or "Foto",
        "caption": "",
    }
