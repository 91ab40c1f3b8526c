"""Local transcription through ffmpeg's ``whisper`` audio filter.

Requires an ffmpeg build with ``--enable-whisper`` (FFmpeg 8+) and a
whisper.cpp ggml model file.
"""

from __future__ import annotations

import os
import subprocess
import tempfile

from ytscribe.adapters.audio.ffmpeg import ffmpeg_binary
from ytscribe.adapters.transcription.base import TranscriptionError, Transcriber


def whisper_filter(*, model_path: str, language: str, queue: int, destination: str) -> str:
    # The filter syntax uses ':' as separator, so paths are escaped.
    escaped_model = model_path.replace(":", r"\:")
    escaped_destination = destination.replace(":", r"\:")
    return (
        f"whisper=model={escaped_model}:language={language}:queue={queue}"
        f":destination={escaped_destination}:format=text"
    )


class FfmpegWhisperTranscriber(Transcriber):
    def __init__(self, model_path: str | None, *, language: str = "auto", queue: int = 15) -> None:
        self._model_path = model_path
        self._language = language or "auto"
        self._queue = queue

    def transcribe(self, local_path: str) -> str:
        if not self._model_path:
            raise TranscriptionError("whisper model path not configured on server")
        try:
            binary = ffmpeg_binary()
        except FileNotFoundError as exc:
            raise TranscriptionError(str(exc)) from exc

        with tempfile.TemporaryDirectory(prefix="ytscribe-whisper-") as scratch:
            destination = os.path.join(scratch, "transcript.txt")
            command = [
                binary,
                "-i",
                local_path,
                "-vn",
                "-af",
                whisper_filter(
                    model_path=self._model_path,
                    language=self._language,
                    queue=self._queue,
                    destination=destination,
                ),
                "-f",
                "null",
                "-",
            ]
            result = subprocess.run(command, capture_output=True, text=True, check=False)
            if result.returncode != 0:
                raise TranscriptionError(
                    f"ffmpeg whisper filter exited with status {result.returncode}: {result.stderr.strip()[-500:]}"
                )

            try:
                with open(destination, encoding="utf-8") as handle:
                    return handle.read().strip()
            except OSError as exc:
                raise TranscriptionError(f"failed to read transcription output: {exc}") from exc


__all__ = ["FfmpegWhisperTranscriber", "whisper_filter"]
