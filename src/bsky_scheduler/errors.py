from __future__ import annotations

from typing import Optional, Sequence


class ConfigurationError(ValueError):
    """Raised when required settings are missing or unparsable."""

    def __init__(self, message: str, missing_keys: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing_keys = tuple(missing_keys)


class BlueskyAPIError(RuntimeError):
    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class FileQueueError(RuntimeError):
    pass
