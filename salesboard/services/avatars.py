"""
Avatar file storage.

Uploaded images are written to ``settings.upload_dir`` under a random
name and served back from ``/uploads``. The returned URL is what the
profile update stores in ``avatar_url``.
"""

import logging
import os
import uuid
from typing import Optional

from salesboard.config import settings
from salesboard.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads"

# Extension by MIME type; anything else image/* is stored without one
IMAGE_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/svg+xml": ".svg",
}


def validate_avatar(content_type: Optional[str], size: int, max_bytes: int) -> None:
    """Reject non-images and files larger than ``max_bytes``."""
    if not content_type or not content_type.startswith("image/"):
        raise InvalidInputError("Please upload an image file")
    if size == 0:
        raise InvalidInputError("Uploaded file is empty")
    if size > max_bytes:
        raise InvalidInputError(
            f"Image is too large ({size} bytes, limit {max_bytes} bytes)"
        )


def save_avatar(
    data: bytes,
    content_type: Optional[str],
    upload_dir: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> str:
    """
    Validate and store an avatar image.

    Args:
        data: Raw file contents
        content_type: MIME type reported by the client
        upload_dir: Target directory (defaults to settings.upload_dir)
        max_bytes: Size limit (defaults to settings.max_avatar_bytes)

    Returns:
        Public URL of the stored file
    """
    upload_dir = upload_dir or settings.upload_dir
    max_bytes = max_bytes or settings.max_avatar_bytes

    validate_avatar(content_type, len(data), max_bytes)

    os.makedirs(upload_dir, exist_ok=True)
    filename = uuid.uuid4().hex + IMAGE_EXTENSIONS.get(content_type, "")
    path = os.path.join(upload_dir, filename)

    with open(path, "wb") as f:
        f.write(data)

    logger.info(f"Stored avatar {filename} ({len(data)} bytes)")
    return f"{UPLOAD_URL_PREFIX}/{filename}"
