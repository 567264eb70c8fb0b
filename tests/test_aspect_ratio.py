from __future__ import annotations

from math import gcd

import pytest

from bsky_scheduler.imaging.aspect import reduce_aspect_ratio
from bsky_scheduler.imaging.results import ExtractionErrorKind
from bsky_scheduler.models import AspectRatio


@pytest.mark.parametrize(
    "width, height, expected",
    [
        (1920, 1080, AspectRatio(16, 9)),
        (800, 600, AspectRatio(4, 3)),
        (500, 500, AspectRatio(1, 1)),
        (7, 11, AspectRatio(7, 11)),
        (1, 1, AspectRatio(1, 1)),
        (3840, 2160, AspectRatio(16, 9)),
        (100, 200, AspectRatio(1, 2)),
        (0xFFFFFFFF, 0xFFFFFFFF, AspectRatio(1, 1)),
    ],
)
def test_reduce_aspect_ratio(width: int, height: int, expected: AspectRatio) -> None:
    assert reduce_aspect_ratio(width, height).unwrap() == expected


def test_reduced_pairs_are_unchanged() -> None:
    for width in range(1, 60):
        for height in range(1, 60):
            reduced = reduce_aspect_ratio(width, height).unwrap()
            assert gcd(reduced.width, reduced.height) == 1
            assert reduce_aspect_ratio(reduced.width, reduced.height).unwrap() == reduced


@pytest.mark.parametrize(
    "width, height",
    [(0, 0), (0, 1080), (1920, 0), (-4, 3), (2**40, 3), (3, 0xFFFFFFFF + 1)],
)
def test_sides_outside_u32_range_are_invalid(width: int, height: int) -> None:
    result = reduce_aspect_ratio(width, height)
    assert not result.ok
    assert result.error is not None
    assert result.error.kind is ExtractionErrorKind.INVALID_DIMENSIONS
