"""ffmpeg subprocess wrappers."""

from __future__ import annotations

import os
import shutil
import subprocess

from ytscribe.adapters.audio.base import AudioProcessingError, AudioProcessor

# Older ffmpeg builds only accept atempo values in [0.5, 2.0] per filter instance.
_ATEMPO_MIN = 0.5
_ATEMPO_MAX = 2.0


def ffmpeg_binary() -> str:
    """Return the ffmpeg executable path or raise if it is not installed."""
    binary = shutil.which("ffmpeg")
    if binary is None:
        raise FileNotFoundError("ffmpeg not found on PATH")
    return binary


def atempo_chain(factor: float) -> str:
    """Build an ``atempo`` filter chain whose product equals ``factor``."""
    if factor <= 0:
        raise ValueError("speed factor must be positive")

    filters: list[float] = []
    remaining = factor
    while remaining > _ATEMPO_MAX:
        filters.append(_ATEMPO_MAX)
        remaining /= _ATEMPO_MAX
    while remaining < _ATEMPO_MIN:
        filters.append(_ATEMPO_MIN)
        remaining /= _ATEMPO_MIN
    filters.append(remaining)
    return ",".join(f"atempo={value:g}" for value in filters)


class FfmpegSpeedUpProcessor(AudioProcessor):
    """Re-encodes audio at a higher tempo so transcription uploads are shorter."""

    def __init__(self, speed_factor: float) -> None:
        if speed_factor <= 0:
            raise ValueError("speed factor must be positive")
        self._speed_factor = speed_factor

    @property
    def speed_factor(self) -> float:
        return self._speed_factor

    def process(self, input_path: str, output_dir: str) -> str:
        output_path = os.path.join(output_dir, "processed.mp3")
        try:
            binary = ffmpeg_binary()
        except FileNotFoundError as exc:
            raise AudioProcessingError(str(exc)) from exc

        command = [
            binary,
            "-y",
            "-i",
            input_path,
            "-vn",
            "-filter:a",
            atempo_chain(self._speed_factor),
            output_path,
        ]
        result = subprocess.run(command, capture_output=True, text=True, check=False)
        if result.returncode != 0:
            raise AudioProcessingError(
                f"ffmpeg exited with status {result.returncode}: {result.stderr.strip()[-500:]}"
            )
        return output_path


__all__ = ["FfmpegSpeedUpProcessor", "atempo_chain", "ffmpeg_binary"]
