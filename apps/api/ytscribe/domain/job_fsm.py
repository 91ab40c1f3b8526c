"""Job lifecycle transition rules."""

from ytscribe.errors import InvalidTransitionError
from ytscribe.schemas.job import JobStatus

INITIAL_STATUS = JobStatus.PENDING

FAILURE_STATES: frozenset[JobStatus] = frozenset(
    {
        JobStatus.DOWNLOAD_FAILED,
        JobStatus.TRANSCRIPTION_FAILED,
        JobStatus.SUMMARY_FAILED,
        JobStatus.FAILED,
    }
)

TERMINAL_STATES: frozenset[JobStatus] = FAILURE_STATES | {JobStatus.COMPLETED}

# Statuses a finished job may be resummarized from.
RESUMMARIZABLE_STATES: frozenset[JobStatus] = frozenset({JobStatus.COMPLETED, JobStatus.SUMMARY_FAILED})

_ALLOWED_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
    JobStatus.PENDING: {JobStatus.PROCESSING},
    JobStatus.PROCESSING: {JobStatus.DOWNLOADING, JobStatus.FAILED},
    JobStatus.DOWNLOADING: {JobStatus.TRANSCRIBING, JobStatus.DOWNLOAD_FAILED, JobStatus.FAILED},
    JobStatus.TRANSCRIBING: {
        JobStatus.SUMMARIZING,
        JobStatus.COMPLETED,
        JobStatus.TRANSCRIPTION_FAILED,
        JobStatus.FAILED,
    },
    JobStatus.SUMMARIZING: {JobStatus.COMPLETED, JobStatus.SUMMARY_FAILED, JobStatus.FAILED},
    JobStatus.COMPLETED: {JobStatus.SUMMARIZING},
    JobStatus.SUMMARY_FAILED: {JobStatus.SUMMARIZING},
    JobStatus.DOWNLOAD_FAILED: set(),
    JobStatus.TRANSCRIPTION_FAILED: set(),
    JobStatus.FAILED: set(),
}


def allowed_next_statuses(status: JobStatus) -> list[JobStatus]:
    """Return deterministically ordered allowed successors for a status."""
    return sorted(_ALLOWED_TRANSITIONS.get(status, set()), key=lambda s: s.value)


def is_terminal(status: JobStatus) -> bool:
    return status in TERMINAL_STATES


def ensure_transition(old_status: JobStatus, new_status: JobStatus) -> None:
    """Validate transition according to lifecycle rules."""
    if new_status not in _ALLOWED_TRANSITIONS.get(old_status, set()):
        raise InvalidTransitionError(old_status, new_status, allowed_next_statuses(old_status))
