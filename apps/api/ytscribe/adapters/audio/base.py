"""Audio preprocessing interfaces."""

from abc import ABC, abstractmethod


class AudioProcessingError(Exception):
    """Raised when downloaded audio cannot be prepared for transcription."""


class AudioProcessor(ABC):
    @abstractmethod
    def process(self, input_path: str, output_dir: str) -> str:
        """Return the path of the audio file to transcribe."""


class PassthroughAudioProcessor(AudioProcessor):
    """Hands the downloaded file to the transcriber unchanged."""

    def process(self, input_path: str, output_dir: str) -> str:
        return input_path


__all__ = ["AudioProcessingError", "AudioProcessor", "PassthroughAudioProcessor"]
