"""Application exception types."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ytscribe.schemas.error import ErrorResponse
from ytscribe.schemas.job import JobStatus

if TYPE_CHECKING:
    from ytscribe.repositories.memory import JobRecord


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class DuplicateJobError(Exception):
    """Raised when a job with the same id is already queued.

    ``job`` is a copy of the existing record so callers can present its current state.
    """

    def __init__(self, job: JobRecord) -> None:
        self.job = job
        super().__init__(f"Job {job.id} is already in the queue")


class InvalidTransitionError(Exception):
    """Raised when a status write does not follow the job lifecycle."""

    def __init__(self, current_status: JobStatus, attempted_status: JobStatus, allowed: list[JobStatus]) -> None:
        self.current_status = current_status
        self.attempted_status = attempted_status
        self.allowed_next_statuses = allowed
        super().__init__(f"Invalid status transition {current_status.value} -> {attempted_status.value}")


__all__ = ["ApiError", "DuplicateJobError", "InvalidTransitionError"]
