"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    worker_enabled: bool = True
    worker_poll_interval_seconds: float = Field(default=5.0, gt=0)

    ytdlp_proxy: str | None = None

    transcription_backend: Literal["openai", "ffmpeg_whisper"] = "openai"
    openai_api_key: str | None = None
    transcription_model: str = "whisper-1"
    whisper_model_path: str | None = None
    whisper_language: str = "auto"
    audio_speed_factor: float = Field(default=1.0, gt=0)

    # An unset endpoint disables summarization.
    summarizer_endpoint: str | None = None
    summarizer_token: str | None = None
    summarizer_model: str = "gpt-4.1-nano"

    model_config = SettingsConfigDict(env_prefix="YTSCRIBE_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
