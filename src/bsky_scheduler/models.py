from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional


class ImageFormat(str, Enum):
    """Container formats the dimension extractor understands."""

    WEBP = "webp"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def mime_type(self) -> str:
        return f"image/{self.value}"


@dataclass(frozen=True, slots=True)
class ImageDimensions:
    """Pixel geometry read from an image header."""

    width: int
    height: int
    format: ImageFormat


@dataclass(frozen=True, slots=True)
class AspectRatio:
    width: int
    height: int

    def as_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class QueueStats:
    """Snapshot of the local image queue."""

    image_count: int = 0
    total_files: int = 0
    by_extension: Dict[str, int] = field(default_factory=dict)


@dataclass(slots=True)
class PostResult:
    success: bool
    message: str
    post_uri: Optional[str] = None
    file_name: Optional[str] = None
