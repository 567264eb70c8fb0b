from __future__ import annotations

from ..models import AspectRatio
from .results import ExtractionErrorKind, Result

# header fields are at most 32 bits wide
MAX_DIMENSION = 0xFFFFFFFF


def _gcd(a: int, b: int) -> int:
    while b:
        a, b = b, a % b
    return a


def reduce_aspect_ratio(width: int, height: int) -> Result[AspectRatio]:
    """Express ``width:height`` in lowest terms.

    Both sides must be positive 32-bit values; anything else is reported as
    ``INVALID_DIMENSIONS`` rather than divided by.
    """

    if not (0 < width <= MAX_DIMENSION and 0 < height <= MAX_DIMENSION):
        return Result.failure(
            ExtractionErrorKind.INVALID_DIMENSIONS,
            f"Cannot reduce aspect ratio of {width}x{height}",
        )
    divisor = _gcd(width, height)
    return Result.success(AspectRatio(width // divisor, height // divisor))
