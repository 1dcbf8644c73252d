"""File validation utilities for content security.

Validates image signatures (magic numbers) so a renamed file cannot pass as
an avatar just by claiming an image MIME type.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ImageType(str, Enum):
    """Accepted avatar formats; the value doubles as the file extension."""

    JPEG = "jpg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"


_SIGNATURES: dict[ImageType, tuple[bytes, ...]] = {
    ImageType.JPEG: (b"\xff\xd8\xff",),
    ImageType.PNG: (b"\x89PNG\r\n\x1a\n",),
    ImageType.GIF: (b"GIF87a", b"GIF89a"),
}


def detect_image_type(data: bytes) -> Optional[ImageType]:
    """Identify an image format from its leading bytes.

    Args:
        data: File content as bytes.

    Returns:
        The detected ImageType, or None when no known signature matches.
    """
    # RIFF container: "RIFF" <size:4> "WEBP"
    if len(data) >= 12 and data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return ImageType.WEBP

    for image_type, signatures in _SIGNATURES.items():
        if any(data.startswith(sig) for sig in signatures):
            return image_type
    return None


def validate_file_signature(data: bytes, expected_type: ImageType) -> bool:
    """Validate file magic numbers to prevent MIME type spoofing.

    Args:
        data: File content as bytes.
        expected_type: Type announced by the client's content type.

    Returns:
        True if the signature matches the expected type, False otherwise.
    """
    if detect_image_type(data) == expected_type:
        return True

    logger.warning(
        "file_signature.invalid",
        extra={
            "expected_type": expected_type.value,
            "actual_prefix": data[:10].hex() if data else "EMPTY",
        },
    )
    return False


def get_image_type_from_mime(mime_type: str | None) -> Optional[ImageType]:
    """Map an upload's MIME type to an accepted image type.

    Args:
        mime_type: MIME type string (e.g. ``image/png``).

    Returns:
        ImageType, or None if the type is not accepted.
    """
    mime_map = {
        "image/jpeg": ImageType.JPEG,
        "image/jpg": ImageType.JPEG,
        "image/pjpeg": ImageType.JPEG,
        "image/png": ImageType.PNG,
        "image/gif": ImageType.GIF,
        "image/webp": ImageType.WEBP,
    }
    return mime_map.get((mime_type or "").lower())
