"""Worker pipeline tests driven by in-process collaborator doubles."""

from __future__ import annotations

import os
import threading
import unittest

from fakes import (
    FakeAudioProcessor,
    FakeFetcher,
    FakeSummarizer,
    FakeTranscriber,
    download_error,
    transcription_error,
)
from ytscribe.adapters.audio import AudioProcessingError
from ytscribe.adapters.summarization import SummaryError
from ytscribe.repositories.memory import JobCandidate, JobStore
from ytscribe.schemas.job import JobStatus
from ytscribe.services.worker import TranscriptionWorker


def _store_with(*job_ids: str) -> JobStore:
    store = JobStore()
    for job_id in job_ids:
        store.add(JobCandidate(id=job_id, source_ref=f"https://youtu.be/{job_id}", title=f"Video {job_id}"))
    return store


class WorkerPipelineTests(unittest.TestCase):
    def test_job_without_summarizer_completes_with_transcript(self) -> None:
        store = _store_with("abc")
        worker = TranscriptionWorker(store, fetcher=FakeFetcher("/tmp/a"), transcriber=FakeTranscriber("hello world"))

        self.assertTrue(worker.run_once())

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertEqual(job.transcript, "hello world")
        self.assertEqual(job.summary, "")
        self.assertEqual(job.media_path, "/tmp/a")
        self.assertEqual(job.last_error, "")

    def test_job_with_summarizer_completes_with_summary(self) -> None:
        store = _store_with("abc")
        summarizer = FakeSummarizer("short")
        worker = TranscriptionWorker(
            store,
            fetcher=FakeFetcher("/tmp/a"),
            transcriber=FakeTranscriber("hello world"),
            summarizer=summarizer,
        )

        worker.run_once()

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.COMPLETED)
        self.assertEqual(job.transcript, "hello world")
        self.assertEqual(job.summary, "short")
        self.assertEqual(summarizer.calls, [("Video abc", "hello world")])

    def test_download_failure_is_recorded_and_never_retried(self) -> None:
        store = _store_with("abc")
        transcriber = FakeTranscriber()
        worker = TranscriptionWorker(store, fetcher=FakeFetcher(error=download_error()), transcriber=transcriber)

        self.assertTrue(worker.run_once())
        self.assertFalse(worker.run_once())

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.DOWNLOAD_FAILED)
        self.assertIn("Failed to download audio", job.last_error)
        self.assertIn("403", job.last_error)
        self.assertEqual(job.media_path, "")
        self.assertEqual(job.transcript, "")
        self.assertEqual(transcriber.calls, [])

    def test_transcription_failure_keeps_media_path(self) -> None:
        store = _store_with("abc")
        summarizer = FakeSummarizer()
        worker = TranscriptionWorker(
            store,
            fetcher=FakeFetcher("/tmp/a"),
            transcriber=FakeTranscriber(error=transcription_error()),
            summarizer=summarizer,
        )

        worker.run_once()

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.TRANSCRIPTION_FAILED)
        self.assertEqual(job.last_error, "Failed to transcribe audio: engine unavailable")
        self.assertEqual(job.media_path, "/tmp/a")
        self.assertEqual(job.transcript, "")
        self.assertEqual(summarizer.calls, [])

    def test_empty_transcript_is_a_transcription_failure(self) -> None:
        store = _store_with("abc")
        worker = TranscriptionWorker(store, fetcher=FakeFetcher("/tmp/a"), transcriber=FakeTranscriber("   "))

        worker.run_once()

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.TRANSCRIPTION_FAILED)
        self.assertEqual(job.transcript, "")

    def test_summary_failure_keeps_transcript(self) -> None:
        store = _store_with("abc")
        worker = TranscriptionWorker(
            store,
            fetcher=FakeFetcher("/tmp/a"),
            transcriber=FakeTranscriber("hello world"),
            summarizer=FakeSummarizer(error=SummaryError("endpoint returned 500")),
        )

        worker.run_once()

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.SUMMARY_FAILED)
        self.assertEqual(job.transcript, "hello world")
        self.assertEqual(job.summary, "")
        self.assertEqual(job.last_error, "Failed to summarize transcript: endpoint returned 500")

    def test_audio_processing_failure_marks_job_failed(self) -> None:
        store = _store_with("abc")
        transcriber = FakeTranscriber()
        worker = TranscriptionWorker(
            store,
            fetcher=FakeFetcher("/tmp/a"),
            transcriber=transcriber,
            audio_processor=FakeAudioProcessor(error=AudioProcessingError("ffmpeg exited with status 1")),
        )

        worker.run_once()

        job = store.get("abc")
        self.assertEqual(job.status, JobStatus.FAILED)
        self.assertIn("Failed to process audio", job.last_error)
        self.assertEqual(transcriber.calls, [])

    def test_transcriber_receives_processed_audio(self) -> None:
        store = _store_with("abc")
        processor = FakeAudioProcessor()
        transcriber = FakeTranscriber()
        fetcher = FakeFetcher("/tmp/a")
        worker = TranscriptionWorker(store, fetcher=fetcher, transcriber=transcriber, audio_processor=processor)

        worker.run_once()

        self.assertEqual(processor.calls, ["/tmp/a"])
        self.assertEqual(transcriber.calls, [os.path.join(fetcher.work_dirs[0], "processed.mp3")])

    def test_unexpected_error_marks_job_failed_and_loop_continues(self) -> None:
        store = _store_with("first", "second")
        transcriber = FakeTranscriber(error=RuntimeError("segfault in engine"))
        worker = TranscriptionWorker(store, fetcher=FakeFetcher("/tmp/a"), transcriber=transcriber)

        with self.assertLogs("ytscribe.services.worker", level="ERROR"):
            self.assertTrue(worker.run_once())
        transcriber.error = None
        self.assertTrue(worker.run_once())

        first = store.get("first")
        self.assertEqual(first.status, JobStatus.FAILED)
        self.assertEqual(first.last_error, "Unexpected worker error: segfault in engine")
        self.assertEqual(store.get("second").status, JobStatus.COMPLETED)

    def test_scratch_directory_is_removed_after_each_job(self) -> None:
        store = _store_with("ok", "broken")
        fetcher = FakeFetcher()
        worker = TranscriptionWorker(store, fetcher=fetcher, transcriber=FakeTranscriber())

        worker.run_once()
        fetcher.error = download_error()
        worker.run_once()

        self.assertEqual(len(fetcher.work_dirs), 2)
        self.assertNotEqual(fetcher.work_dirs[0], fetcher.work_dirs[1])
        for work_dir in fetcher.work_dirs:
            self.assertFalse(os.path.exists(work_dir))

    def test_status_reflects_the_running_stage(self) -> None:
        store = _store_with("abc")
        seen: dict[str, JobStatus] = {}
        fetcher = FakeFetcher("/tmp/a", on_call=lambda _ref: seen.setdefault("fetch", store.get("abc").status))
        transcriber = FakeTranscriber(on_call=lambda _path: seen.setdefault("transcribe", store.get("abc").status))

        def observe_summary(_title: str, _text: str) -> None:
            job = store.get("abc")
            seen["summarize"] = job.status
            self.assertEqual(job.transcript, "hello world")

        worker = TranscriptionWorker(
            store,
            fetcher=fetcher,
            transcriber=transcriber,
            summarizer=FakeSummarizer(on_call=observe_summary),
        )

        worker.run_once()

        self.assertEqual(
            seen,
            {
                "fetch": JobStatus.DOWNLOADING,
                "transcribe": JobStatus.TRANSCRIBING,
                "summarize": JobStatus.SUMMARIZING,
            },
        )

    def test_jobs_are_processed_in_arrival_order(self) -> None:
        store = _store_with("i1", "i2", "i3")
        fetcher = FakeFetcher("/tmp/a")
        order: list[str] = []
        fetcher.on_call = order.append
        worker = TranscriptionWorker(store, fetcher=fetcher, transcriber=FakeTranscriber())

        while worker.run_once():
            pass

        self.assertEqual(order, ["https://youtu.be/i1", "https://youtu.be/i2", "https://youtu.be/i3"])
        self.assertTrue(all(job.status is JobStatus.COMPLETED for job in store.list_jobs()))

    def test_idle_run_once_does_not_touch_the_store(self) -> None:
        store = JobStore()
        worker = TranscriptionWorker(store, fetcher=FakeFetcher(), transcriber=FakeTranscriber())

        self.assertFalse(worker.run_once())
        self.assertEqual(store.job_write_count, 0)


class WorkerLoopTests(unittest.TestCase):
    def test_run_forever_drains_queue_and_stops_on_event(self) -> None:
        store = _store_with("a", "b")
        stop_event = threading.Event()
        worker = TranscriptionWorker(
            store,
            fetcher=FakeFetcher("/tmp/a"),
            transcriber=FakeTranscriber(),
            poll_interval_seconds=0.01,
        )
        thread = threading.Thread(target=worker.run_forever, args=(stop_event,), daemon=True)

        thread.start()
        try:
            for _ in range(500):
                if all(job.status is JobStatus.COMPLETED for job in store.list_jobs()):
                    break
                stop_event.wait(0.01)
        finally:
            stop_event.set()
            thread.join(timeout=5)

        self.assertFalse(thread.is_alive())
        self.assertTrue(all(job.status is JobStatus.COMPLETED for job in store.list_jobs()))

    def test_readers_never_see_completed_without_transcript(self) -> None:
        store = _store_with(*(f"job-{index}" for index in range(50)))
        worker = TranscriptionWorker(store, fetcher=FakeFetcher("/tmp/a"), transcriber=FakeTranscriber("text"))
        done = threading.Event()
        violations: list[str] = []

        def read_until_done() -> None:
            while not done.is_set():
                for job in store.list_jobs():
                    if job.status is JobStatus.COMPLETED and not job.transcript:
                        violations.append(job.id)

        readers = [threading.Thread(target=read_until_done, daemon=True) for _ in range(4)]
        for reader in readers:
            reader.start()
        try:
            while worker.run_once():
                pass
        finally:
            done.set()
            for reader in readers:
                reader.join(timeout=5)

        self.assertEqual(violations, [])
        self.assertEqual(len(store), 50)


if __name__ == "__main__":
    unittest.main()
