"""Turn user-selected files into base64 data URIs."""
from __future__ import annotations

import logging
import mimetypes
import os
from typing import Optional

from .compositor import encode_data_uri
from .constants import SUPPORTED_IMAGE_FORMATS

logger = logging.getLogger(__name__)


def guess_image_mime(path: str) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(path)
    if mime_type and mime_type.startswith("image/"):
        return mime_type

    ext = os.path.splitext(path)[1].lower()
    if mime_type is None and ext in SUPPORTED_IMAGE_FORMATS:
        return "image/jpeg" if ext == ".jpg" else f"image/{ext[1:]}"
    return None


def bytes_to_data_uri(data: bytes, mime_type: Optional[str]) -> Optional[str]:
    """Encode raw image bytes as a data URI.

    Returns ``None`` for empty data or a MIME type that is not an image.
    """
    if not data or not mime_type or not mime_type.startswith("image/"):
        return None
    return encode_data_uri(data, mime_type)


def file_to_data_uri(path: str) -> Optional[str]:
    """Read an image file as a data URI.

    Non-image files and unreadable paths yield ``None`` without raising.
    """
    mime_type = guess_image_mime(path)
    if mime_type is None:
        logger.debug("Ignoring non-image file %s", path)
        return None

    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError:
        logger.debug("Could not read %s", path, exc_info=True)
        return None

    return bytes_to_data_uri(data, mime_type)
