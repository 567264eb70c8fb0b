from __future__ import annotations

import logging
import random
import shutil
import time
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import FileQueueError
from ..models import QueueStats

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_EXTENSIONS: tuple[str, ...] = (".webp", ".jpg", ".jpeg", ".png")
# Bluesky rejects image blobs above this size
MAX_FILE_SIZE = 1_000_000
_SECONDS_PER_DAY = 24 * 60 * 60


def _normalized_extension(path: Path) -> Optional[str]:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_IMAGE_EXTENSIONS:
        return None
    return ".jpg" if suffix == ".jpeg" else suffix


class FileQueue:
    """Images waiting in ``queue_dir`` and already-posted ones in ``posted_dir``."""

    def __init__(self, queue_dir: Path, posted_dir: Path, rng: Optional[random.Random] = None) -> None:
        self.queue_dir = Path(queue_dir)
        self.posted_dir = Path(posted_dir)
        self._rng = rng or random.Random()

    @staticmethod
    def supported_extensions() -> List[str]:
        return list(SUPPORTED_IMAGE_EXTENSIONS)

    def list_images(self) -> List[Path]:
        if not self.queue_dir.is_dir():
            return []
        return sorted(
            entry
            for entry in self.queue_dir.iterdir()
            if entry.is_file() and _normalized_extension(entry) is not None
        )

    def get_random_image_file(self) -> Optional[Path]:
        try:
            images = self.list_images()
        except OSError:
            logger.error("Unable to list queue directory %s", self.queue_dir, exc_info=True)
            return None
        if not images:
            return None
        return self._rng.choice(images)

    def move_to_posted(self, file_path: Path) -> Path:
        source = Path(file_path)
        destination = self.posted_dir / source.name
        try:
            self.posted_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(destination))
        except OSError as exc:
            raise FileQueueError(f"Failed to move file to posted directory: {exc}") from exc
        logger.info("Moved file: %s -> %s", source.name, self.posted_dir)
        return destination

    def cleanup_old_files(self, days: int, *, now: Optional[float] = None) -> int:
        """Delete posted files last modified more than *days* days ago."""

        if not self.posted_dir.is_dir():
            return 0

        cutoff = (now if now is not None else time.time()) - days * _SECONDS_PER_DAY
        deleted = 0
        for entry in self.posted_dir.iterdir():
            if not entry.is_file():
                continue
            try:
                if entry.stat().st_mtime < cutoff:
                    entry.unlink()
                    deleted += 1
                    logger.info("Deleted old file: %s", entry.name)
            except OSError:
                logger.error("Error checking file %s", entry.name, exc_info=True)

        if deleted:
            logger.info("Cleaned up %s old files", deleted)
        return deleted

    def ensure_directories(self) -> None:
        try:
            self.queue_dir.mkdir(parents=True, exist_ok=True)
            self.posted_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileQueueError(f"Failed to create directories: {exc}") from exc

    def get_queue_stats(self) -> QueueStats:
        if not self.queue_dir.is_dir():
            return QueueStats()

        total_files = 0
        by_extension: Dict[str, int] = {}
        for entry in self.queue_dir.iterdir():
            if not entry.is_file():
                continue
            total_files += 1
            extension = _normalized_extension(entry)
            if extension is not None:
                by_extension[extension] = by_extension.get(extension, 0) + 1
        return QueueStats(
            image_count=sum(by_extension.values()),
            total_files=total_files,
            by_extension=by_extension,
        )
