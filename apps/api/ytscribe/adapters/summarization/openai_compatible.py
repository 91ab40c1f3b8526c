"""Summarizer for OpenAI-compatible chat completion endpoints (OpenAI, Ollama)."""

from __future__ import annotations

import openai
from openai import OpenAI

from ytscribe.adapters.summarization.base import SummaryError, Summarizer

SUMMARIZER_SYSTEM_PROMPT = (
    "You are an expert video content analyzer. When the user provides a video title and transcription, "
    "create a comprehensive summary that extracts maximum context, insights and takeaways.\n"
    "Do not use Markdown formatting, lists or bullet points. Write in a clear, engaging style suitable "
    "for a general audience.\n"
    "Prioritize accuracy over speculation, but make reasonable inferences when context strongly suggests them."
)

# Ollama ignores the key but the client refuses to start without one.
_PLACEHOLDER_API_KEY = "not-needed"


def build_user_prompt(title: str, text: str) -> str:
    return f"Video Title: {title}\nTranscription: {text}"


class OpenAICompatibleSummarizer(Summarizer):
    def __init__(
        self,
        *,
        endpoint: str,
        model: str,
        token: str | None = None,
        temperature: float = 1.0,
        client: OpenAI | None = None,
    ) -> None:
        if not endpoint:
            raise ValueError("summarizer endpoint is required")
        if not model:
            raise ValueError("summarizer model is required")
        self._model = model
        self._temperature = temperature
        self._client = client or OpenAI(base_url=endpoint, api_key=token or _PLACEHOLDER_API_KEY)

    def summarize(self, title: str, text: str) -> str:
        if not text.strip():
            raise SummaryError("text to summarize cannot be empty")

        try:
            completion = self._client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": SUMMARIZER_SYSTEM_PROMPT},
                    {"role": "user", "content": build_user_prompt(title, text)},
                ],
                temperature=self._temperature,
            )
        except openai.OpenAIError as exc:
            raise SummaryError(str(exc)) from exc

        if not completion.choices:
            raise SummaryError("no response from LLM")
        content = (completion.choices[0].message.content or "").strip()
        if not content:
            raise SummaryError("LLM returned an empty summary")
        return content


__all__ = ["OpenAICompatibleSummarizer", "SUMMARIZER_SYSTEM_PROMPT", "build_user_prompt"]
