"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel

from ytscribe.schemas.job import JobStatus


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class TransitionErrorDetails(BaseModel):
    current_status: JobStatus
    attempted_status: JobStatus
    allowed_next_statuses: list[JobStatus] | None = None


class FsmTransitionError(BaseModel):
    code: Literal["FSM_TRANSITION_INVALID"]
    message: str
    details: TransitionErrorDetails


class NoLeakNotFoundError(BaseModel):
    code: Literal["RESOURCE_NOT_FOUND"]
    message: str


class UpstreamErrorDetails(BaseModel):
    reason: str | None = None
    detail: str | None = None


class UpstreamError(BaseModel):
    code: Literal["METADATA_RESOLUTION_FAILED", "SUMMARY_FAILED"]
    message: str
    details: UpstreamErrorDetails | None = None
