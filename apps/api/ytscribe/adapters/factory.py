"""Select collaborator implementations from settings."""

from __future__ import annotations

from ytscribe.adapters.audio import AudioProcessor, FfmpegSpeedUpProcessor, PassthroughAudioProcessor
from ytscribe.adapters.media import YtDlpMediaSource
from ytscribe.adapters.summarization import NoOpSummarizer, OpenAICompatibleSummarizer, Summarizer
from ytscribe.adapters.transcription import FfmpegWhisperTranscriber, OpenAITranscriber, Transcriber
from ytscribe.core.config import Settings


def build_media_source(settings: Settings) -> YtDlpMediaSource:
    return YtDlpMediaSource(proxy=settings.ytdlp_proxy)


def build_transcriber(settings: Settings) -> Transcriber:
    if settings.transcription_backend == "ffmpeg_whisper":
        return FfmpegWhisperTranscriber(settings.whisper_model_path, language=settings.whisper_language)
    return OpenAITranscriber(settings.openai_api_key, model=settings.transcription_model)


def build_summarizer(settings: Settings) -> Summarizer:
    if not settings.summarizer_endpoint:
        return NoOpSummarizer()
    return OpenAICompatibleSummarizer(
        endpoint=settings.summarizer_endpoint,
        model=settings.summarizer_model,
        token=settings.summarizer_token,
    )


def build_audio_processor(settings: Settings) -> AudioProcessor:
    if settings.audio_speed_factor == 1.0:
        return PassthroughAudioProcessor()
    return FfmpegSpeedUpProcessor(settings.audio_speed_factor)
