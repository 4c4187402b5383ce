from enum import Enum

from app.jobs.exceptions import InvalidTransitionError


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


VALID_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.PROCESSING, JobStatus.FAILED}),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in VALID_TRANSITIONS.items() if not targets)


def is_valid_transition(current: JobStatus, target: JobStatus) -> bool:
    return target in VALID_TRANSITIONS.get(current, frozenset())


def sources_for(target: JobStatus) -> tuple[JobStatus, ...]:
    """Statuses from which ``target`` may be entered, in declaration order."""
    return tuple(s for s, targets in VALID_TRANSITIONS.items() if target in targets)


def ensure_transition(job_id: str, current: JobStatus, target: JobStatus) -> None:
    if not is_valid_transition(current, target):
        raise InvalidTransitionError(job_id, current.value, target.value)
