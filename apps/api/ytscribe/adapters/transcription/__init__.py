"""Transcription engine adapters."""

from .base import TranscriptionError, Transcriber
from .ffmpeg_whisper import FfmpegWhisperTranscriber
from .openai_whisper import OpenAITranscriber

__all__ = [
    "FfmpegWhisperTranscriber",
    "OpenAITranscriber",
    "TranscriptionError",
    "Transcriber",
]
