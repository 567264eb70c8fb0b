"""Read pixel dimensions from WebP, JPEG and PNG headers without decoding.

Every multi-byte field goes through :func:`_read_uint`, which checks the
buffer bounds first and states the byte order explicitly. Parsers report
problems through :class:`Result` instead of raising.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from ..models import ImageDimensions, ImageFormat
from .results import ExtractionErrorKind, Result
from .sniffer import ByteBuffer, classify

logger = logging.getLogger(__name__)

ByteOrder = Literal["little", "big"]

WEBP_HEADER_SIZE = 12
WEBP_CHUNK_HEADER_SIZE = 8
WEBP_CHUNK_VP8 = b"VP8 "
WEBP_CHUNK_VP8L = b"VP8L"
WEBP_CHUNK_VP8X = b"VP8X"

JPEG_SOF_MARKERS = frozenset(
    [0xC0, 0xC1, 0xC2, 0xC3, 0xC5, 0xC6, 0xC7, 0xC9, 0xCA, 0xCB, 0xCD, 0xCE, 0xCF]
)

PNG_IHDR_OFFSET = 8
PNG_IHDR_TAG = b"IHDR"
PNG_IHDR_MIN_LENGTH = 13


def _read_uint(data: ByteBuffer, offset: int, size: int, byteorder: ByteOrder) -> Optional[int]:
    if offset < 0 or offset + size > len(data):
        return None
    return int.from_bytes(data[offset : offset + size], byteorder, signed=False)


def _not_found(fmt: ImageFormat) -> Result[ImageDimensions]:
    return Result.failure(
        ExtractionErrorKind.DIMENSIONS_NOT_FOUND,
        f"Could not find {fmt.value.upper()} dimensions",
    )


def parse_webp_dimensions(data: ByteBuffer) -> Result[ImageDimensions]:
    offset = WEBP_HEADER_SIZE
    while offset + WEBP_CHUNK_HEADER_SIZE <= len(data):
        tag = bytes(data[offset : offset + 4])
        chunk_size = _read_uint(data, offset + 4, 4, "little")
        assert chunk_size is not None
        payload = offset + WEBP_CHUNK_HEADER_SIZE

        if tag == WEBP_CHUNK_VP8:
            # 3-byte frame tag and 3-byte start code precede the 14-bit fields
            raw_width = _read_uint(data, payload + 6, 2, "little")
            raw_height = _read_uint(data, payload + 8, 2, "little")
            if raw_width is None or raw_height is None:
                break
            return Result.success(
                ImageDimensions((raw_width & 0x3FFF) + 1, (raw_height & 0x3FFF) + 1, ImageFormat.WEBP)
            )

        if tag == WEBP_CHUNK_VP8L:
            bits = _read_uint(data, payload + 1, 4, "little")
            if bits is None:
                break
            return Result.success(
                ImageDimensions((bits & 0x3FFF) + 1, ((bits >> 14) & 0x3FFF) + 1, ImageFormat.WEBP)
            )

        if tag == WEBP_CHUNK_VP8X:
            # 4 bytes of feature flags, then canvas width-1 and height-1 as 24-bit fields
            raw_width = _read_uint(data, payload + 4, 3, "little")
            raw_height = _read_uint(data, payload + 7, 3, "little")
            if raw_width is None or raw_height is None:
                break
            return Result.success(ImageDimensions(raw_width + 1, raw_height + 1, ImageFormat.WEBP))

        logger.debug("Skipping WebP chunk %r (%s bytes)", tag, chunk_size)
        offset = payload + chunk_size + (chunk_size & 1)

    return _not_found(ImageFormat.WEBP)


def parse_jpeg_dimensions(data: ByteBuffer) -> Result[ImageDimensions]:
    offset = 2
    length = len(data)
    while offset + 1 < length:
        if data[offset] != 0xFF:
            offset += 1
            continue

        marker_at = offset + 1
        while marker_at < length and data[marker_at] == 0xFF:
            marker_at += 1
        if marker_at >= length:
            break
        marker = data[marker_at]
        offset = marker_at - 1

        if marker in JPEG_SOF_MARKERS:
            # segment length (2) and sample precision (1) come before height and width
            height = _read_uint(data, offset + 5, 2, "big")
            width = _read_uint(data, offset + 7, 2, "big")
            if height is None or width is None:
                break
            if width == 0 or height == 0:
                return Result.failure(
                    ExtractionErrorKind.MALFORMED_HEADER,
                    f"JPEG frame header declares {width}x{height}",
                )
            return Result.success(ImageDimensions(width, height, ImageFormat.JPEG))

        segment_length = _read_uint(data, offset + 2, 2, "big")
        if segment_length is None:
            break
        logger.debug("Skipping JPEG marker 0x%02X (%s bytes)", marker, segment_length)
        offset += 2 + segment_length

    return _not_found(ImageFormat.JPEG)


def parse_png_dimensions(data: ByteBuffer) -> Result[ImageDimensions]:
    chunk_length = _read_uint(data, PNG_IHDR_OFFSET, 4, "big")
    tag = bytes(data[PNG_IHDR_OFFSET + 4 : PNG_IHDR_OFFSET + 8])
    if chunk_length is None or tag != PNG_IHDR_TAG or chunk_length < PNG_IHDR_MIN_LENGTH:
        return Result.failure(ExtractionErrorKind.MALFORMED_HEADER, "PNG IHDR chunk is missing or truncated")

    width = _read_uint(data, PNG_IHDR_OFFSET + 8, 4, "big")
    height = _read_uint(data, PNG_IHDR_OFFSET + 12, 4, "big")
    if width is None or height is None:
        return Result.failure(ExtractionErrorKind.MALFORMED_HEADER, "PNG IHDR chunk is missing or truncated")
    if width == 0 or height == 0:
        return Result.failure(
            ExtractionErrorKind.MALFORMED_HEADER,
            f"PNG IHDR declares {width}x{height}",
        )
    return Result.success(ImageDimensions(width, height, ImageFormat.PNG))


_PARSERS = {
    ImageFormat.WEBP: parse_webp_dimensions,
    ImageFormat.JPEG: parse_jpeg_dimensions,
    ImageFormat.PNG: parse_png_dimensions,
}


def detect_dimensions(data: ByteBuffer) -> Result[ImageDimensions]:
    """Classify *data* and run the matching header parser."""

    fmt = classify(data)
    if fmt is None:
        return Result.failure(
            ExtractionErrorKind.UNSUPPORTED_FORMAT,
            "Unsupported image format for dimension detection",
        )
    result = _PARSERS[fmt](data)
    if not result.ok:
        logger.debug("Dimension detection failed for %s buffer: %s", fmt.value, result.error)
    return result
