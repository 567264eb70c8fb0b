from __future__ import annotations

import pytest

from image_bytes import JPEG_300x400, WEBP_100x200, png_header


@pytest.fixture
def webp_100x200() -> bytes:
    return WEBP_100x200


@pytest.fixture
def jpeg_300x400() -> bytes:
    return JPEG_300x400


@pytest.fixture
def png_150x250() -> bytes:
    return png_header(150, 250)
