from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_POST_TEXT = "#AIart"
DEFAULT_CLEANUP_DAYS = 7
DEFAULT_QUEUE_DIR = "./queue"
DEFAULT_POSTED_DIR = "./posted"

ENV_IDENTIFIER = "BLUESKY_IDENTIFIER"
ENV_PASSWORD = "BLUESKY_PASSWORD"
ENV_POST_TEXT = "POST_TEXT"
ENV_CLEANUP_DAYS = "CLEANUP_DAYS"
ENV_QUEUE_DIR = "QUEUE_DIR"
ENV_POSTED_DIR = "POSTED_DIR"


@dataclass(frozen=True, slots=True)
class AppConfig:
    identifier: str
    password: str
    post_text: str = DEFAULT_POST_TEXT
    cleanup_days: int = DEFAULT_CLEANUP_DAYS
    queue_dir: Path = Path(DEFAULT_QUEUE_DIR)
    posted_dir: Path = Path(DEFAULT_POSTED_DIR)


def read_env_file(env_path: Path) -> Dict[str, str]:
    """Parse ``KEY=value`` lines, ignoring blanks and ``#`` comments."""

    values: Dict[str, str] = {}
    if not env_path.exists():
        return values

    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if "=" not in stripped:
                continue
            key, raw_value = stripped.split("=", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
                value = value[1:-1]
            values[key.strip()] = value
    except OSError:
        logger.debug("Unable to read env file %s", env_path, exc_info=True)
    return values


def load_app_config(
    env_file: Optional[Path] = Path(".env"),
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Build the app configuration; process environment wins over the env file."""

    file_values = read_env_file(env_file) if env_file is not None else {}
    env = os.environ if environ is None else environ

    def lookup(key: str) -> Optional[str]:
        value = env.get(key) or file_values.get(key)
        return value or None

    identifier = lookup(ENV_IDENTIFIER)
    password = lookup(ENV_PASSWORD)
    missing = [key for key, value in ((ENV_IDENTIFIER, identifier), (ENV_PASSWORD, password)) if not value]
    if missing:
        raise ConfigurationError(
            f"{' and '.join(missing)} must be set in the environment or {env_file}",
            missing_keys=missing,
        )

    raw_days = lookup(ENV_CLEANUP_DAYS)
    try:
        cleanup_days = int(raw_days) if raw_days is not None else DEFAULT_CLEANUP_DAYS
    except ValueError as exc:
        raise ConfigurationError(f"{ENV_CLEANUP_DAYS} must be an integer, got {raw_days!r}") from exc

    assert identifier is not None and password is not None
    return AppConfig(
        identifier=identifier,
        password=password,
        post_text=lookup(ENV_POST_TEXT) or DEFAULT_POST_TEXT,
        cleanup_days=cleanup_days,
        queue_dir=Path(lookup(ENV_QUEUE_DIR) or DEFAULT_QUEUE_DIR),
        posted_dir=Path(lookup(ENV_POSTED_DIR) or DEFAULT_POSTED_DIR),
    )
