from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class JobOutcome:
    """Terminal result of an extraction job, as reported to its owner."""

    job_id: str
    file_name: str
    succeeded: bool
    project_id: str | None = None
    pages_processed: int = 0
    error: str | None = None

    @classmethod
    def success(
        cls,
        job_id: str,
        file_name: str,
        pages_processed: int,
        project_id: str | None = None,
    ) -> "JobOutcome":
        return cls(
            job_id=job_id,
            file_name=file_name,
            succeeded=True,
            project_id=project_id,
            pages_processed=pages_processed,
        )

    @classmethod
    def failure(
        cls,
        job_id: str,
        file_name: str,
        error: str,
        project_id: str | None = None,
    ) -> "JobOutcome":
        return cls(
            job_id=job_id,
            file_name=file_name,
            succeeded=False,
            project_id=project_id,
            error=error,
        )


@dataclass(frozen=True)
class Notification:
    user_id: str
    type: str
    title: str
    message: str
    severity: str
    category: str
    action_url: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PushResult:
    success: bool
    platform: str
    token: str
    error: str | None = None
    token_invalid: bool = False
