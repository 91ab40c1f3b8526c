"""In-memory job store shared by the request handlers and the worker."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
import threading

from ytscribe.domain.job_fsm import INITIAL_STATUS, RESUMMARIZABLE_STATES, allowed_next_statuses, ensure_transition
from ytscribe.errors import DuplicateJobError, InvalidTransitionError
from ytscribe.schemas.job import JobStatus


@dataclass(slots=True, frozen=True)
class JobCandidate:
    """Resolved metadata for a job that is about to be queued."""

    id: str
    source_ref: str
    title: str
    duration: str = ""
    published_at: str = ""


@dataclass(slots=True, eq=False)
class JobRecord:
    id: str
    source_ref: str
    title: str
    duration: str
    published_at: str
    status: JobStatus
    created_at: datetime
    updated_at: datetime | None = None
    media_path: str = ""
    transcript: str = ""
    summary: str = ""
    last_error: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JobRecord):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(slots=True)
class JobStore:
    """Arrival-ordered job collection guarded by a single lock.

    Every operation holds the lock only for in-memory work and returns copies,
    so callers never share mutable state with the store.
    """

    _jobs: list[JobRecord] = field(default_factory=list)
    _index: dict[str, JobRecord] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    job_write_count: int = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def add(self, candidate: JobCandidate) -> JobRecord:
        with self._lock:
            existing = self._index.get(candidate.id)
            if existing is not None:
                raise DuplicateJobError(replace(existing))

            now = datetime.now(UTC)
            job = JobRecord(
                id=candidate.id,
                source_ref=candidate.source_ref,
                title=candidate.title,
                duration=candidate.duration,
                published_at=candidate.published_at,
                status=INITIAL_STATUS,
                created_at=now,
                updated_at=now,
            )
            self._jobs.append(job)
            self._index[job.id] = job
            self.job_write_count += 1
            return replace(job)

    def claim_next(self) -> JobRecord | None:
        """Move the oldest pending job to processing and return it."""
        with self._lock:
            for job in self._jobs:
                if job.status is JobStatus.PENDING:
                    self._transition(job, JobStatus.PROCESSING)
                    return replace(job)
            return None

    def update(
        self,
        job_id: str,
        *,
        status: JobStatus,
        error: str = "",
        transcript: str | None = None,
        summary: str | None = None,
    ) -> None:
        """Apply a status write; unknown ids are ignored.

        ``last_error`` always takes ``error``. Transcript and summary are only
        written when non-empty, so a stage can never clear an earlier result.
        """
        with self._lock:
            job = self._index.get(job_id)
            if job is None:
                return

            ensure_transition(job.status, status)
            job.status = status
            job.last_error = error
            if transcript:
                job.transcript = transcript
            if summary:
                job.summary = summary
            job.updated_at = datetime.now(UTC)
            self.job_write_count += 1

    def set_media_path(self, job_id: str, path: str) -> None:
        with self._lock:
            job = self._index.get(job_id)
            if job is None or not path:
                return
            job.media_path = path
            job.updated_at = datetime.now(UTC)
            self.job_write_count += 1

    def begin_resummarize(self, job_id: str) -> JobRecord | None:
        """Atomically move a finished job with a transcript back to summarizing."""
        with self._lock:
            job = self._index.get(job_id)
            if job is None:
                return None
            if job.status not in RESUMMARIZABLE_STATES or not job.transcript:
                raise InvalidTransitionError(job.status, JobStatus.SUMMARIZING, allowed_next_statuses(job.status))
            self._transition(job, JobStatus.SUMMARIZING)
            return replace(job)

    def list_jobs(self) -> list[JobRecord]:
        """Return copies of all jobs, most recently added first."""
        with self._lock:
            return [replace(job) for job in reversed(self._jobs)]

    def get(self, job_id: str) -> JobRecord | None:
        with self._lock:
            job = self._index.get(job_id)
            return replace(job) if job is not None else None

    def _transition(self, job: JobRecord, new_status: JobStatus) -> None:
        # Caller holds the lock.
        ensure_transition(job.status, new_status)
        job.status = new_status
        job.updated_at = datetime.now(UTC)
        self.job_write_count += 1
