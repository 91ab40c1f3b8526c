"""Media source adapters."""

from .base import (
    FetchedMedia,
    MediaFetchError,
    MediaFetcher,
    MediaMetadata,
    MetadataResolutionError,
    MetadataResolver,
)
from .ytdlp import YtDlpMediaSource

__all__ = [
    "FetchedMedia",
    "MediaFetchError",
    "MediaFetcher",
    "MediaMetadata",
    "MetadataResolutionError",
    "MetadataResolver",
    "YtDlpMediaSource",
]
