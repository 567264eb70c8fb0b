from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from ..bluesky.client import BlueskyClient
from ..config import AppConfig, load_app_config
from ..errors import ConfigurationError
from ..media.file_queue import FileQueue
from ..scheduler.poster import PostConfig, Poster, format_queue_stats


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Post one queued image to Bluesky",
        epilog="Example cron entry: 0 9,15,21 * * * cd /path/to/project && bsky-scheduler",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-s", "--status", action="store_true", help="Show queue status only")
    mode.add_argument(
        "-c",
        "--check-config",
        "--config",
        dest="check_config",
        action="store_true",
        help="Validate configuration only",
    )
    parser.add_argument(
        "--env-file", type=Path, default=Path(".env"), help="Path to the KEY=value settings file"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _build_poster(config: AppConfig) -> Poster:
    client = BlueskyClient(config.identifier, config.password)
    file_queue = FileQueue(config.queue_dir, config.posted_dir)
    return Poster(client, file_queue, PostConfig(text=config.post_text, cleanup_days=config.cleanup_days))


def _show_status(config: AppConfig, poster: Poster) -> None:
    stats = poster.get_status()
    logger.info("Queue status: %s", format_queue_stats(stats))
    logger.info("Queue directory: %s", config.queue_dir)
    logger.info("Posted directory: %s", config.posted_dir)
    logger.info("Bluesky account: %s", config.identifier)


def _validate(poster: Poster) -> bool:
    report = poster.validate_configuration()
    if report.valid:
        logger.info("Configuration is valid")
        return True
    logger.error("Configuration validation failed:")
    for issue in report.issues:
        logger.error("  - %s", issue)
    return False


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = load_app_config(args.env_file)
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(1) from exc
    logger.info("Config loaded for: %s", config.identifier)

    poster = _build_poster(config)
    if args.status:
        _show_status(config, poster)
        raise SystemExit(0)

    if not _validate(poster):
        raise SystemExit(1)
    if args.check_config:
        raise SystemExit(0)

    stats = poster.get_status()
    if stats.image_count == 0:
        logger.info("No images in queue. Add some images to %s and try again.", config.queue_dir)
        raise SystemExit(0)

    result = poster.execute_post()
    if not result.success:
        logger.error("Post failed: %s", result.message)
        raise SystemExit(1)

    logger.info("Post successful: file=%s uri=%s", result.file_name, result.post_uri)


if __name__ == "__main__":
    main()
