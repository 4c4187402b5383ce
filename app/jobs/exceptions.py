class JobError(Exception):
    """Base exception for job lifecycle errors."""


class JobNotFoundError(JobError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class InvalidTransitionError(JobError):
    """Raised when a status change is not in the transition table, or when the
    row's status changed underneath the caller."""

    def __init__(self, job_id: str, current: str, target: str) -> None:
        super().__init__(f"Job {job_id} has status {current}, cannot transition to {target}")
        self.job_id = job_id
        self.current = current
        self.target = target


class FileDeletedError(JobError):
    user_message = "File has been deleted"

    def __init__(self, job_id: str, file_id: str) -> None:
        super().__init__(f"Source file {file_id} of job {job_id} has been deleted")
        self.job_id = job_id
        self.file_id = file_id
