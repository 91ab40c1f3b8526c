"""Media source interfaces."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Literal


@dataclass(slots=True, frozen=True)
class MediaMetadata:
    id: str
    title: str
    duration: str = ""
    published_at: str = ""


@dataclass(slots=True, frozen=True)
class FetchedMedia:
    local_path: str


class MetadataResolutionError(Exception):
    """Raised when a reference cannot be resolved to media metadata."""

    def __init__(self, message: str, *, reason: Literal["not_found", "unreachable"] = "unreachable") -> None:
        self.reason = reason
        super().__init__(message)


class MediaFetchError(Exception):
    """Raised when media audio cannot be downloaded."""


class MetadataResolver(ABC):
    @abstractmethod
    def resolve(self, source_ref: str) -> MediaMetadata:
        """Resolve identifying metadata without downloading the media."""


class MediaFetcher(ABC):
    @abstractmethod
    def fetch(self, source_ref: str, output_dir: str) -> FetchedMedia:
        """Download the audio track of ``source_ref`` into ``output_dir``."""


__all__ = [
    "FetchedMedia",
    "MediaFetchError",
    "MediaFetcher",
    "MediaMetadata",
    "MetadataResolutionError",
    "MetadataResolver",
]
