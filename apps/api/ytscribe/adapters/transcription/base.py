"""Transcription engine interfaces."""

from abc import ABC, abstractmethod


class TranscriptionError(Exception):
    """Raised when an engine fails to turn audio into text."""


class Transcriber(ABC):
    @abstractmethod
    def transcribe(self, local_path: str) -> str:
        """Return the transcript of the audio file at ``local_path``."""


__all__ = ["TranscriptionError", "Transcriber"]
