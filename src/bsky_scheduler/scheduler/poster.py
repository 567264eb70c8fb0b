from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from ..bluesky.client import BlueskyClient
from ..media.file_queue import MAX_FILE_SIZE, FileQueue
from ..models import PostResult, QueueStats

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PostConfig:
    text: str
    cleanup_days: int
    max_file_size: int = MAX_FILE_SIZE


@dataclass(slots=True)
class ValidationReport:
    valid: bool
    issues: List[str] = field(default_factory=list)


def format_queue_stats(stats: QueueStats) -> str:
    extensions = ", ".join(f"{count}{ext}" for ext, count in sorted(stats.by_extension.items())) or "none"
    return f"{stats.image_count} images ({extensions}), {stats.total_files} total files"


class Poster:
    """Posts one queued image per run and files it away afterwards."""

    def __init__(self, client: BlueskyClient, file_queue: FileQueue, config: PostConfig) -> None:
        self.client = client
        self.file_queue = file_queue
        self.config = config

    def execute_post(self) -> PostResult:
        try:
            return self._execute_post()
        except Exception as exc:  # noqa: BLE001 - every failure becomes a PostResult
            logger.error("Post execution failed: %s", exc, exc_info=True)
            return PostResult(success=False, message=f"Post failed: {exc}")

    def _execute_post(self) -> PostResult:
        logger.info("Cleaning up files older than %s days", self.config.cleanup_days)
        self.file_queue.cleanup_old_files(self.config.cleanup_days)
        self.file_queue.ensure_directories()

        stats = self.file_queue.get_queue_stats()
        logger.info("Queue stats: %s", format_queue_stats(stats))
        if stats.image_count == 0:
            supported = ", ".join(self.file_queue.supported_extensions())
            return PostResult(
                success=False,
                message=f"No supported images found in queue. Supported formats: {supported}",
            )

        selected = self.file_queue.get_random_image_file()
        if selected is None:
            return PostResult(success=False, message="Failed to select image file from queue")
        logger.info("Selected file: %s", selected)

        size = selected.stat().st_size
        if size > self.config.max_file_size:
            return PostResult(
                success=False,
                message=f"{selected.name} is {size} bytes, above the {self.config.max_file_size} byte limit",
                file_name=selected.name,
            )

        image_data = selected.read_bytes()
        logger.info("Read file: %s bytes", len(image_data))
        response = self.client.post_with_image_and_aspect_ratio(image_data, self.config.text)
        logger.info("Post successful: %s", response.uri)

        self.file_queue.move_to_posted(selected)
        return PostResult(
            success=True,
            message="Posted successfully",
            post_uri=response.uri,
            file_name=selected.name,
        )

    def validate_configuration(self) -> ValidationReport:
        issues: List[str] = []
        if not self.client.identifier:
            issues.append("Bluesky identifier is not set")
        if not self.client.password:
            issues.append("Bluesky password is not set")
        if not self.config.text or not self.config.text.strip():
            issues.append("Post text is empty")
        if self.config.cleanup_days <= 0:
            issues.append("Cleanup days must be greater than 0")
        try:
            self.file_queue.ensure_directories()
        except Exception as exc:  # noqa: BLE001 - reported as a validation issue
            issues.append(f"Directory creation failed: {exc}")
        return ValidationReport(valid=not issues, issues=issues)

    def get_status(self) -> QueueStats:
        return self.file_queue.get_queue_stats()
