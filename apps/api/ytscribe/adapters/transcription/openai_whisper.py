"""OpenAI speech-to-text adapter."""

from __future__ import annotations

import openai
from openai import OpenAI

from ytscribe.adapters.transcription.base import TranscriptionError, Transcriber


class OpenAITranscriber(Transcriber):
    """Transcribes audio files with the OpenAI audio transcription API.

    The client is created on first use so a missing API key fails the job
    instead of the process.
    """

    def __init__(self, api_key: str | None, model: str = "whisper-1") -> None:
        if not model:
            raise ValueError("transcription model is required")
        self._api_key = api_key
        self._model = model
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if not self._api_key:
            raise TranscriptionError("OpenAI API key not configured on server")
        if self._client is None:
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def transcribe(self, local_path: str) -> str:
        client = self._get_client()
        try:
            with open(local_path, "rb") as audio_file:
                response = client.audio.transcriptions.create(model=self._model, file=audio_file)
        except OSError as exc:
            raise TranscriptionError(f"failed to open audio file: {exc}") from exc
        except openai.OpenAIError as exc:
            raise TranscriptionError(str(exc)) from exc

        return response.text


__all__ = ["OpenAITranscriber"]
