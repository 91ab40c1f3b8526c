"""Summarization engine interfaces."""

from abc import ABC, abstractmethod


class SummaryError(Exception):
    """Raised when a summary cannot be produced."""


class Summarizer(ABC):
    """Summarizes a transcript given the media title."""

    @property
    def enabled(self) -> bool:
        return True

    @abstractmethod
    def summarize(self, title: str, text: str) -> str:
        """Return a summary of ``text``."""


class NoOpSummarizer(Summarizer):
    """Disabled summarizer; jobs complete straight after transcription."""

    @property
    def enabled(self) -> bool:
        return False

    def summarize(self, title: str, text: str) -> str:
        return ""


__all__ = ["NoOpSummarizer", "SummaryError", "Summarizer"]
