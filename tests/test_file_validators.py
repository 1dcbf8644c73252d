"""Tests for image signature validation.

Tests cover:
- Magic number detection for JPEG, PNG, GIF and WEBP
- MIME type mapping
- Spoofed content rejection
"""

from io import BytesIO

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from areca.core.errors import PayloadTooLargeAppError, ValidationAppError
from areca.core.file_validation import read_avatar_upload
from areca.utils.file_validators import (
    ImageType,
    detect_image_type,
    get_image_type_from_mime,
    validate_file_signature,
)

WEBP_BYTES = b"RIFF" + (1024).to_bytes(4, "little") + b"WEBPVP8 " + b"\x00" * 16


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"\xff\xd8\xff\xe0\x00\x10JFIF", ImageType.JPEG),
        (b"\x89PNG\r\n\x1a\n\x00\x00", ImageType.PNG),
        (b"GIF89a\x01\x00", ImageType.GIF),
        (b"GIF87a\x01\x00", ImageType.GIF),
        (WEBP_BYTES, ImageType.WEBP),
    ],
)
def test_detects_supported_images(data: bytes, expected: ImageType) -> None:
    assert detect_image_type(data) is expected


@pytest.mark.parametrize(
    "data",
    [b"", b"%PDF-1.4", b"MZ\x90\x00", b"RIFF\x00\x00\x00\x00WAVEfmt "],
)
def test_unknown_content_is_not_an_image(data: bytes) -> None:
    assert detect_image_type(data) is None


def test_signature_must_match_declared_type() -> None:
    png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8

    assert validate_file_signature(png, ImageType.PNG) is True
    assert validate_file_signature(png, ImageType.JPEG) is False
    assert validate_file_signature(b"", ImageType.PNG) is False


@pytest.mark.parametrize(
    ("mime", "expected"),
    [
        ("image/jpeg", ImageType.JPEG),
        ("image/JPEG", ImageType.JPEG),
        ("image/png", ImageType.PNG),
        ("image/gif", ImageType.GIF),
        ("image/webp", ImageType.WEBP),
        ("application/pdf", None),
        ("", None),
        (None, None),
    ],
)
def test_mime_mapping(mime: str | None, expected: ImageType | None) -> None:
    assert get_image_type_from_mime(mime) == expected


def _upload(data: bytes, content_type: str, size: int | None = None) -> UploadFile:
    return UploadFile(
        file=BytesIO(data),
        filename="avatar",
        size=len(data) if size is None else size,
        headers=Headers({"content-type": content_type}),
    )


class TestReadAvatarUpload:
    """Upload reading combines MIME, size and signature checks."""

    @pytest.mark.asyncio
    async def test_accepts_matching_image(self) -> None:
        png = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32

        content, image_type = await read_avatar_upload(_upload(png, "image/png"))

        assert content == png
        assert image_type is ImageType.PNG

    @pytest.mark.asyncio
    async def test_rejects_unsupported_mime(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await read_avatar_upload(_upload(b"%PDF-1.4", "application/pdf"))
        assert exc_info.value.code == "invalid_file_type"

    @pytest.mark.asyncio
    async def test_rejects_empty_file(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await read_avatar_upload(_upload(b"", "image/png"))
        assert exc_info.value.code == "empty_file"

    @pytest.mark.asyncio
    async def test_rejects_spoofed_content(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            await read_avatar_upload(_upload(b"MZ\x90\x00not-an-image", "image/jpeg"))
        assert exc_info.value.code == "invalid_file_signature"

    @pytest.mark.asyncio
    async def test_rejects_oversized_declared_size(self) -> None:
        png = b"\x89PNG\r\n\x1a\n"

        with pytest.raises(PayloadTooLargeAppError) as exc_info:
            await read_avatar_upload(_upload(png, "image/png", size=50 * 1024 * 1024))
        assert exc_info.value.status_code == 413
