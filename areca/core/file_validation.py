"""File validation utilities for upload security."""
from __future__ import annotations

import logging

from fastapi import UploadFile

from areca.core.config import settings
from areca.core.errors import PayloadTooLargeAppError, ValidationAppError
from areca.utils.file_validators import (
    ImageType,
    get_image_type_from_mime,
    validate_file_signature,
)

logger = logging.getLogger(__name__)


def _too_large() -> PayloadTooLargeAppError:
    return PayloadTooLargeAppError(
        code="file_too_large",
        message=f"File too large. Maximum size is {settings.app.max_upload_size_mb}MB",
        details={"hint": f"Upload a file of at most {settings.app.max_upload_size_mb}MB"},
    )


async def read_upload_file_limited(file: UploadFile) -> bytes:
    """Read an uploaded file in chunks enforcing the max size limit.

    Uses file.size if available (multipart headers), falls back to chunked
    reading with enforcement.

    Args:
        file: FastAPI upload file instance.

    Returns:
        File content as bytes if within the allowed size limit.

    Raises:
        PayloadTooLargeAppError: If the file exceeds the configured size limit.
    """
    max_bytes = settings.app.max_upload_size_mb * 1024 * 1024

    file_size = getattr(file, "size", None)
    if file_size is not None and file_size > max_bytes:
        logger.warning(
            "file_validation.rejected_by_header",
            extra={"file_size": file_size, "max_bytes": max_bytes},
        )
        raise _too_large()

    size = 0
    chunks: list[bytes] = []

    while True:
        chunk = await file.read(8192)
        if not chunk:
            break

        size += len(chunk)
        if size > max_bytes:
            logger.warning(
                "file_validation.rejected_by_chunked_read",
                extra={"size": size, "max_bytes": max_bytes},
            )
            raise _too_large()
        chunks.append(chunk)

    return b"".join(chunks)


async def read_avatar_upload(file: UploadFile) -> tuple[bytes, ImageType]:
    """Read an avatar upload and check that it really is the image it claims.

    Raises:
        ValidationAppError: Missing file, unsupported content type, or a
            signature that does not match the content type.
        PayloadTooLargeAppError: If the file exceeds the size limit.
    """
    image_type = get_image_type_from_mime(file.content_type)
    if image_type is None:
        raise ValidationAppError(
            code="invalid_file_type",
            message="Invalid file type. Only JPEG, PNG, GIF and WEBP are allowed",
            details={"field": "file"},
        )

    content = await read_upload_file_limited(file)
    if not content:
        raise ValidationAppError(code="empty_file", message="No file provided", details={"field": "file"})

    if not validate_file_signature(content, image_type):
        raise ValidationAppError(
            code="invalid_file_signature",
            message="File content does not match its declared type",
            details={"field": "file"},
        )
    return content, image_type
