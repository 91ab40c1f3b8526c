"""Single-flight transcription worker."""

from __future__ import annotations

import logging
import tempfile
import threading

from ytscribe.adapters.audio import AudioProcessingError, AudioProcessor, PassthroughAudioProcessor
from ytscribe.adapters.factory import (
    build_audio_processor,
    build_media_source,
    build_summarizer,
    build_transcriber,
)
from ytscribe.adapters.media import MediaFetchError, MediaFetcher
from ytscribe.adapters.summarization import NoOpSummarizer, SummaryError, Summarizer
from ytscribe.adapters.transcription import TranscriptionError, Transcriber
from ytscribe.core.config import Settings
from ytscribe.core.logging_safety import error_detail
from ytscribe.domain.job_fsm import is_terminal
from ytscribe.repositories.memory import JobRecord, JobStore
from ytscribe.schemas.job import JobStatus

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 5.0
_WORK_DIR_PREFIX = "ytscribe-worker-"


class TranscriptionWorker:
    """Pulls pending jobs one at a time and drives them through the pipeline.

    Only one worker should run per store. Stage failures are recorded on the
    job (``status`` + ``last_error``) and never stop the loop; nothing is
    retried.
    """

    def __init__(
        self,
        store: JobStore,
        *,
        fetcher: MediaFetcher,
        transcriber: Transcriber,
        summarizer: Summarizer | None = None,
        audio_processor: AudioProcessor | None = None,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        self._store = store
        self._fetcher = fetcher
        self._transcriber = transcriber
        self._summarizer = summarizer or NoOpSummarizer()
        self._audio_processor = audio_processor or PassthroughAudioProcessor()
        self._poll_interval_seconds = poll_interval_seconds

    def run_forever(self, stop_event: threading.Event) -> None:
        logger.info(
            "worker.started poll_interval=%s summarizer_enabled=%s",
            self._poll_interval_seconds,
            self._summarizer.enabled,
        )
        while not stop_event.is_set():
            if not self.run_once():
                stop_event.wait(self._poll_interval_seconds)
        logger.info("worker.stopped")

    def run_once(self) -> bool:
        """Process the next pending job, if any. Returns whether a job was claimed."""
        job = self._store.claim_next()
        if job is None:
            return False

        logger.info("worker.job_claimed job_id=%s", job.id)
        try:
            self.process(job)
        except Exception as exc:
            logger.exception("worker.job_crashed job_id=%s", job.id)
            current = self._store.get(job.id)
            if current is not None and not is_terminal(current.status):
                self._fail(job, JobStatus.FAILED, error_detail("Unexpected worker error", exc))
        return True

    def process(self, job: JobRecord) -> None:
        try:
            scratch = tempfile.TemporaryDirectory(prefix=_WORK_DIR_PREFIX, ignore_cleanup_errors=True)
        except OSError as exc:
            self._fail(job, JobStatus.FAILED, error_detail("Failed to create temp directory", exc))
            return

        with scratch as work_dir:
            self._run_pipeline(job, work_dir)

    def _run_pipeline(self, job: JobRecord, work_dir: str) -> None:
        self._store.update(job.id, status=JobStatus.DOWNLOADING)
        try:
            fetched = self._fetcher.fetch(job.source_ref, work_dir)
        except MediaFetchError as exc:
            self._fail(job, JobStatus.DOWNLOAD_FAILED, error_detail("Failed to download audio", exc))
            return
        self._store.set_media_path(job.id, fetched.local_path)
        logger.info("worker.downloaded job_id=%s", job.id)

        try:
            audio_path = self._audio_processor.process(fetched.local_path, work_dir)
        except AudioProcessingError as exc:
            self._fail(job, JobStatus.FAILED, error_detail("Failed to process audio", exc))
            return

        self._store.update(job.id, status=JobStatus.TRANSCRIBING)
        try:
            transcript = self._transcriber.transcribe(audio_path)
            if not transcript.strip():
                raise TranscriptionError("engine returned an empty transcript")
        except TranscriptionError as exc:
            self._fail(job, JobStatus.TRANSCRIPTION_FAILED, error_detail("Failed to transcribe audio", exc))
            return

        if not self._summarizer.enabled:
            # Transcript and terminal status land in the same write.
            self._store.update(job.id, status=JobStatus.COMPLETED, transcript=transcript)
            logger.info("worker.completed job_id=%s summarized=false", job.id)
            return

        self._store.update(job.id, status=JobStatus.SUMMARIZING, transcript=transcript)
        try:
            summary = self._summarizer.summarize(job.title, transcript)
        except SummaryError as exc:
            self._fail(job, JobStatus.SUMMARY_FAILED, error_detail("Failed to summarize transcript", exc))
            return

        self._store.update(job.id, status=JobStatus.COMPLETED, summary=summary)
        logger.info("worker.completed job_id=%s summarized=true", job.id)

    def _fail(self, job: JobRecord, status: JobStatus, detail: str) -> None:
        logger.warning("worker.job_failed job_id=%s status=%s", job.id, status.value)
        self._store.update(job.id, status=status, error=detail)


def build_worker(store: JobStore, settings: Settings) -> TranscriptionWorker:
    """Wire a worker with the collaborators selected by ``settings``."""
    return TranscriptionWorker(
        store,
        fetcher=build_media_source(settings),
        transcriber=build_transcriber(settings),
        summarizer=build_summarizer(settings),
        audio_processor=build_audio_processor(settings),
        poll_interval_seconds=settings.worker_poll_interval_seconds,
    )
