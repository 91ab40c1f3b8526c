"""Job service layer."""

import logging

from ytscribe.adapters.media import MetadataResolutionError, MetadataResolver
from ytscribe.adapters.summarization import NoOpSummarizer, SummaryError, Summarizer
from ytscribe.core.logging_safety import error_detail, safe_log_identifier
from ytscribe.errors import ApiError, DuplicateJobError, InvalidTransitionError
from ytscribe.repositories.memory import JobCandidate, JobRecord, JobStore
from ytscribe.schemas.job import Job, JobStatus, SubmitJobResponse

logger = logging.getLogger(__name__)


class JobService:
    def __init__(
        self,
        store: JobStore,
        *,
        resolver: MetadataResolver | None = None,
        summarizer: Summarizer | None = None,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._summarizer = summarizer or NoOpSummarizer()

    def submit_job(self, *, source_ref: str) -> SubmitJobResponse:
        if self._resolver is None:
            raise RuntimeError("JobService.submit_job requires a metadata resolver")

        safe_ref = safe_log_identifier(source_ref, prefix="ref")
        # Resolution blocks on the network, so it runs before the store is touched.
        try:
            metadata = self._resolver.resolve(source_ref)
        except MetadataResolutionError as exc:
            logger.warning("submit.rejected source_ref=%s code=METADATA_RESOLUTION_FAILED reason=%s", safe_ref, exc.reason)
            raise ApiError(
                status_code=502,
                code="METADATA_RESOLUTION_FAILED",
                message="Failed to fetch video metadata.",
                details={"reason": exc.reason, "detail": str(exc)},
            ) from exc

        candidate = JobCandidate(
            id=metadata.id,
            source_ref=source_ref,
            title=metadata.title,
            duration=metadata.duration,
            published_at=metadata.published_at,
        )
        try:
            record = self._store.add(candidate)
        except DuplicateJobError as exc:
            logger.info("submit.duplicate source_ref=%s job_id=%s status=%s", safe_ref, exc.job.id, exc.job.status.value)
            return SubmitJobResponse(job=self._to_job(exc.job), duplicate=True)

        logger.info("submit.queued source_ref=%s job_id=%s", safe_ref, record.id)
        return SubmitJobResponse(job=self._to_job(record), duplicate=False)

    def list_jobs(self) -> list[Job]:
        return [self._to_job(record) for record in self._store.list_jobs()]

    def get_job(self, *, job_id: str) -> Job:
        record = self._store.get(job_id)
        if record is None:
            raise ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")

        return self._to_job(record)

    def resummarize_job(self, *, job_id: str) -> Job:
        """Run the summary stage again for a finished job, on the calling thread."""
        if self._store.get(job_id) is None:
            raise ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")
        if not self._summarizer.enabled:
            raise ApiError(
                status_code=409,
                code="SUMMARIZER_DISABLED",
                message="Summarization is not configured on this server.",
            )

        try:
            record = self._store.begin_resummarize(job_id)
        except InvalidTransitionError as exc:
            logger.warning(
                "resummarize.rejected job_id=%s code=FSM_TRANSITION_INVALID current_status=%s",
                job_id,
                exc.current_status.value,
            )
            raise ApiError(
                status_code=409,
                code="FSM_TRANSITION_INVALID",
                message="Job cannot be summarized in its current state.",
                details={
                    "current_status": exc.current_status,
                    "attempted_status": exc.attempted_status,
                    "allowed_next_statuses": exc.allowed_next_statuses,
                },
            ) from exc
        if record is None:
            raise ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")

        try:
            summary = self._summarizer.summarize(record.title, record.transcript)
        except SummaryError as exc:
            detail = error_detail("Failed to summarize transcript", exc)
            logger.warning("resummarize.failed job_id=%s code=SUMMARY_FAILED", job_id)
            raise self._summary_failed(job_id, detail) from exc
        except Exception as exc:
            # The job must not stay in summarizing, which nothing can leave.
            detail = error_detail("Unexpected summarizer error", exc)
            logger.exception("resummarize.crashed job_id=%s code=SUMMARY_FAILED", job_id)
            raise self._summary_failed(job_id, detail) from exc

        self._store.update(job_id, status=JobStatus.COMPLETED, summary=summary)
        logger.info("resummarize.completed job_id=%s", job_id)
        return self.get_job(job_id=job_id)

    def _summary_failed(self, job_id: str, detail: str) -> ApiError:
        self._store.update(job_id, status=JobStatus.SUMMARY_FAILED, error=detail)
        return ApiError(
            status_code=502,
            code="SUMMARY_FAILED",
            message="Failed to summarize transcript.",
            details={"detail": detail},
        )

    @staticmethod
    def _to_job(record: JobRecord) -> Job:
        return Job(
            id=record.id,
            source_ref=record.source_ref,
            title=record.title,
            duration=record.duration,
            published_at=record.published_at,
            status=record.status,
            media_path=record.media_path,
            transcript=record.transcript,
            summary=record.summary,
            last_error=record.last_error,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
