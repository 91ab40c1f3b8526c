"""yt-dlp backed metadata resolver and audio fetcher."""

from __future__ import annotations

import logging
import os
import re
from typing import Any

import yt_dlp
from yt_dlp.utils import DownloadError

from ytscribe.adapters.media.base import (
    FetchedMedia,
    MediaFetchError,
    MediaFetcher,
    MediaMetadata,
    MetadataResolutionError,
    MetadataResolver,
)
from ytscribe.core.logging_safety import safe_log_identifier

logger = logging.getLogger(__name__)

_UPLOAD_DATE_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})$")
_NOT_FOUND_MARKERS = ("unsupported url", "video unavailable", "is not a valid url", "private video", "404")


def format_duration(seconds: float | int | None) -> str:
    """Render seconds the way yt-dlp's ``duration_string`` does (``1:02:03``, ``4:05``)."""
    if seconds is None:
        return ""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def normalize_upload_date(value: str | None) -> str:
    """Turn ``YYYYMMDD`` into ISO ``YYYY-MM-DD``; other values pass through."""
    if not value:
        return ""
    match = _UPLOAD_DATE_PATTERN.match(value)
    if match is None:
        return value
    return "-".join(match.groups())


class YtDlpMediaSource(MetadataResolver, MediaFetcher):
    """Resolves and downloads media through the yt-dlp Python API."""

    def __init__(self, *, proxy: str | None = None) -> None:
        self._proxy = proxy

    def _base_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
        }
        if self._proxy:
            options["proxy"] = self._proxy
        return options

    def resolve(self, source_ref: str) -> MediaMetadata:
        safe_ref = safe_log_identifier(source_ref, prefix="ref")
        options = self._base_options()
        options["skip_download"] = True

        try:
            with yt_dlp.YoutubeDL(options) as ydl:
                info = ydl.extract_info(source_ref, download=False)
        except DownloadError as exc:
            reason = "not_found" if _looks_like_not_found(str(exc)) else "unreachable"
            logger.warning("resolve.failed source_ref=%s reason=%s", safe_ref, reason)
            raise MetadataResolutionError(f"Failed to fetch video metadata: {exc}", reason=reason) from exc

        if not info or "entries" in info:
            raise MetadataResolutionError("Reference does not point to a single video", reason="not_found")

        video_id = str(info.get("id") or "").strip()
        if not video_id:
            raise MetadataResolutionError("Extracted video id is empty", reason="not_found")

        duration = info.get("duration_string") or format_duration(info.get("duration"))
        logger.info("resolve.succeeded source_ref=%s job_id=%s", safe_ref, video_id)
        return MediaMetadata(
            id=video_id,
            title=str(info.get("title") or video_id),
            duration=str(duration),
            published_at=normalize_upload_date(info.get("upload_date")),
        )

    def fetch(self, source_ref: str, output_dir: str) -> FetchedMedia:
        options = self._base_options()
        options.update(
            {
                "format": "bestaudio/best",
                "outtmpl": os.path.join(os.path.abspath(output_dir), "%(id)s.%(ext)s"),
            }
        )

        try:
            with yt_dlp.YoutubeDL(options) as ydl:
                info = ydl.extract_info(source_ref, download=True)
                if not info:
                    raise MediaFetchError("yt-dlp did not return any output")
                local_path = _downloaded_path(info) or ydl.prepare_filename(info)
        except DownloadError as exc:
            raise MediaFetchError(str(exc)) from exc

        if not os.path.isfile(local_path):
            raise MediaFetchError(f"Downloaded file not found at {local_path}")
        return FetchedMedia(local_path=local_path)


def _downloaded_path(info: dict[str, Any]) -> str | None:
    for download in info.get("requested_downloads") or []:
        path = download.get("filepath")
        if path:
            return path
    return None


def _looks_like_not_found(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _NOT_FOUND_MARKERS)


__all__ = ["YtDlpMediaSource", "format_duration", "normalize_upload_date"]
