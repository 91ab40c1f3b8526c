"""Job API schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DOWNLOADING = "downloading"
    TRANSCRIBING = "transcribing"
    SUMMARIZING = "summarizing"
    COMPLETED = "completed"
    DOWNLOAD_FAILED = "download_failed"
    TRANSCRIPTION_FAILED = "transcription_failed"
    SUMMARY_FAILED = "summary_failed"
    FAILED = "failed"


class Job(BaseModel):
    id: str
    source_ref: str
    title: str
    duration: str
    published_at: str
    status: JobStatus
    media_path: str = ""
    transcript: str = ""
    summary: str = ""
    last_error: str = ""
    created_at: datetime
    updated_at: datetime | None = None


class SubmitJobRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    source_ref: str = Field(min_length=1)


class SubmitJobResponse(BaseModel):
    job: Job
    duplicate: bool
