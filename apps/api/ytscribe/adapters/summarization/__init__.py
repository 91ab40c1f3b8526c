"""Summarization engine adapters."""

from .base import NoOpSummarizer, SummaryError, Summarizer
from .openai_compatible import OpenAICompatibleSummarizer

__all__ = [
    "NoOpSummarizer",
    "OpenAICompatibleSummarizer",
    "SummaryError",
    "Summarizer",
]
