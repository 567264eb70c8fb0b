from __future__ import annotations

from typing import Optional, Union

from ..models import ImageFormat

ByteBuffer = Union[bytes, bytearray, memoryview]

WEBP_RIFF_TAG = b"RIFF"
WEBP_FORMAT_TAG = b"WEBP"
WEBP_MIN_SIZE = 12

JPEG_SIGNATURE = b"\xff\xd8\xff"
JPEG_MIN_SIZE = 3

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
# signature plus the IHDR length, tag, width and height fields
PNG_MIN_SIZE = 24


def is_webp(data: ByteBuffer) -> bool:
    if len(data) < WEBP_MIN_SIZE:
        return False
    return data[0:4] == WEBP_RIFF_TAG and data[8:12] == WEBP_FORMAT_TAG


def is_jpeg(data: ByteBuffer) -> bool:
    return len(data) >= JPEG_MIN_SIZE and data[0:3] == JPEG_SIGNATURE


def is_png(data: ByteBuffer) -> bool:
    return len(data) >= PNG_MIN_SIZE and data[0:8] == PNG_SIGNATURE


def classify(data: ByteBuffer) -> Optional[ImageFormat]:
    """Identify *data* by its magic bytes.

    Checks run WebP, JPEG, PNG in that order and the first match wins.
    ``None`` means the buffer matches none of them.
    """

    if is_webp(data):
        return ImageFormat.WEBP
    if is_jpeg(data):
        return ImageFormat.JPEG
    if is_png(data):
        return ImageFormat.PNG
    return None
