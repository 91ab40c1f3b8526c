"""Audio preprocessing adapters."""

from .base import AudioProcessingError, AudioProcessor, PassthroughAudioProcessor
from .ffmpeg import FfmpegSpeedUpProcessor

__all__ = [
    "AudioProcessingError",
    "AudioProcessor",
    "FfmpegSpeedUpProcessor",
    "PassthroughAudioProcessor",
]
