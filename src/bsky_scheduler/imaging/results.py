"""Explicit success/failure values returned by the metadata extractor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ExtractionErrorKind(str, Enum):
    UNSUPPORTED_FORMAT = "unsupported_format"
    MALFORMED_HEADER = "malformed_header"
    DIMENSIONS_NOT_FOUND = "dimensions_not_found"
    INVALID_DIMENSIONS = "invalid_dimensions"


@dataclass(frozen=True, slots=True)
class ExtractionError:
    kind: ExtractionErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class ImageMetadataError(ValueError):
    """Raised by :meth:`Result.unwrap` when the result holds a failure."""

    def __init__(self, error: ExtractionError) -> None:
        super().__init__(str(error))
        self.error = error

    @property
    def kind(self) -> ExtractionErrorKind:
        return self.error.kind


@dataclass(frozen=True, slots=True)
class Result(Generic[T]):
    """Holds either a value or an :class:`ExtractionError`, never both."""

    value: Optional[T] = None
    error: Optional[ExtractionError] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ExtractionErrorKind, message: str) -> "Result[T]":
        return cls(error=ExtractionError(kind, message))

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise ImageMetadataError(self.error)
        assert self.value is not None
        return self.value
