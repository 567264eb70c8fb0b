from .bluesky.client import BlueskyClient, PostResponse, Session
from .bluesky.facets import extract_hashtag_facets
from .config import AppConfig, load_app_config
from .errors import BlueskyAPIError, ConfigurationError, FileQueueError
from .imaging.aspect import reduce_aspect_ratio
from .imaging.dimensions import detect_dimensions
from .imaging.results import ExtractionError, ExtractionErrorKind, ImageMetadataError, Result
from .imaging.sniffer import classify
from .media.file_queue import FileQueue
from .models import AspectRatio, ImageDimensions, ImageFormat, PostResult, QueueStats
from .scheduler.poster import PostConfig, Poster, ValidationReport

__all__ = [
    "AppConfig",
    "AspectRatio",
    "BlueskyAPIError",
    "BlueskyClient",
    "ConfigurationError",
    "ExtractionError",
    "ExtractionErrorKind",
    "FileQueue",
    "FileQueueError",
    "ImageDimensions",
    "ImageFormat",
    "ImageMetadataError",
    "PostConfig",
    "PostResponse",
    "PostResult",
    "Poster",
    "QueueStats",
    "Result",
    "Session",
    "ValidationReport",
    "classify",
    "detect_dimensions",
    "extract_hashtag_facets",
    "load_app_config",
    "reduce_aspect_ratio",
]
