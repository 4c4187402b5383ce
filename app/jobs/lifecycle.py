"""State machine for OCR extraction jobs.

All status writes go through JobLifecycleManager. Every transition is
checked against the transition table before touching the database and is
then applied as a compare-and-set, so a job that changed underneath the
caller is rejected rather than overwritten.
"""

import math
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any

from app.database.models import AuditEntry, ExtractionJob, NewJob
from app.database.repositories.audit_repository import AuditRepository
from app.database.repositories.file_repository import FileRepository
from app.database.repositories.job_repository import JobRepository
from app.jobs.exceptions import FileDeletedError, InvalidTransitionError, JobNotFoundError
from app.jobs.state import TERMINAL_STATUSES, JobStatus, ensure_transition, sources_for
from app.logging.logger import Log
from app.notifications.dispatcher import NotificationDispatcher
from app.notifications.models import JobOutcome
from app.worker.task_queue import BaseTaskQueue, DatabaseTaskQueue

DEFAULT_STUCK_TIMEOUT = timedelta(minutes=15)

_AUDIT_RESOURCE = "DOCUMENT"


def stuck_job_message(timeout: timedelta) -> str:
    minutes = int(timeout.total_seconds() // 60)
    return f"Job timeout - exceeded maximum processing time ({minutes} minutes)"


def progress_percent(processed: int, total: int) -> int:
    """Whole-number percent, rounding halves up; 0 when total is unknown."""
    if total <= 0:
        return 0
    return min(100, math.floor(processed / total * 100 + 0.5))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobLifecycleManager:
    def __init__(
        self,
        job_repo: JobRepository,
        file_repo: FileRepository,
        audit_repo: AuditRepository,
        dispatcher: NotificationDispatcher,
        task_queue: BaseTaskQueue | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._job_repo = job_repo
        self._file_repo = file_repo
        self._audit_repo = audit_repo
        self._dispatcher = dispatcher
        self._task_queue = task_queue if task_queue is not None else DatabaseTaskQueue()
        self._clock = clock

    def submit(self, new_job: NewJob) -> str:
        """Create a PENDING job and hand it to the task queue."""
        job = self._job_repo.create(new_job)
        Log.info(f"Job {job.id} created for file '{job.file_name}' (user {job.user_id})")
        self._audit(
            job,
            action="CREATE",
            before=None,
            after={"status": JobStatus.PENDING.value, "fileName": job.file_name},
        )
        self._task_queue.enqueue(job.id)
        return job.id

    def get(self, job_id: str) -> ExtractionJob:
        job = self._job_repo.find_by_id(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def start(self, job_id: str) -> ExtractionJob:
        """PENDING -> PROCESSING.

        Raises:
            JobNotFoundError: unknown job.
            InvalidTransitionError: the job is not PENDING (or stopped being).
            FileDeletedError: the source file is gone; the job is failed first.
        """
        job = self.get(job_id)
        ensure_transition(job.id, job.status, JobStatus.PROCESSING)

        if job.file_id and not self._file_repo.file_exists(job.file_id):
            self.fail(job.id, FileDeletedError.user_message)
            raise FileDeletedError(job.id, job.file_id)

        if not self._job_repo.mark_processing(job.id):
            raise self._lost_race(job.id, JobStatus.PROCESSING)

        self._audit(
            job,
            before={"status": job.status.value},
            after={"status": JobStatus.PROCESSING.value, "fileName": job.file_name},
        )
        Log.info(f"Job {job.id} started")
        # built locally; nothing after the claim may raise
        return replace(job, status=JobStatus.PROCESSING, started_at=self._clock())

    def report_progress(self, job_id: str, processed: int, total: int) -> bool:
        """Record page progress for a PROCESSING job.

        Returns False when nothing was written (job no longer PROCESSING).
        Progress never decreases; a smaller value than already stored is
        ignored by the repository.
        """
        total = max(total, 0)
        processed = min(max(processed, 0), total)
        percent = progress_percent(processed, total)
        Log.info(f"Job {job_id} progress: {processed}/{total} ({percent}%)")
        written = self._job_repo.update_progress(job_id, processed, total, percent)
        if not written:
            Log.debug(f"Job {job_id} progress not written; job is not processing")
        return written

    def complete(self, job_id: str, result: dict[str, Any]) -> None:
        """PROCESSING -> COMPLETED with ``result`` stored and progress 100."""
        job = self.get(job_id)
        ensure_transition(job.id, job.status, JobStatus.COMPLETED)
        if not self._job_repo.mark_completed(job.id, result):
            raise self._lost_race(job.id, JobStatus.COMPLETED)

        pages_processed = int(result.get("pageCount") or 1)
        self._audit(
            job,
            before={"status": job.status.value},
            after={"status": JobStatus.COMPLETED.value, "pagesProcessed": pages_processed},
        )
        Log.info(f"Job {job.id} completed successfully")
        self._dispatcher.notify(
            job.user_id,
            JobOutcome.success(job.id, job.file_name, pages_processed, job.project_id),
        )

    def fail(self, job_id: str, error: str) -> None:
        """Any non-terminal status -> FAILED with ``error`` stored and progress 0."""
        job = self.get(job_id)
        ensure_transition(job.id, job.status, JobStatus.FAILED)
        if not self._job_repo.mark_failed(job.id, error, sources_for(JobStatus.FAILED)):
            raise self._lost_race(job.id, JobStatus.FAILED)
        self._record_failure(job, error)

    def reclaim_stuck(self, timeout: timedelta = DEFAULT_STUCK_TIMEOUT) -> int:
        """Fail PROCESSING jobs whose start is older than ``timeout``.

        Safe to run repeatedly; jobs already terminal are never matched.
        """
        threshold = self._clock() - timeout
        stuck = self._job_repo.find_stuck(threshold)
        if not stuck:
            return 0

        Log.warning(f"Found {len(stuck)} stuck jobs, marking as failed")
        message = stuck_job_message(timeout)
        reclaimed = 0
        for job in stuck:
            if job.status in TERMINAL_STATUSES:
                continue
            if not self._job_repo.mark_failed(job.id, message, (JobStatus.PROCESSING,)):
                Log.info(f"Job {job.id} finished before it could be reclaimed")
                continue
            reclaimed += 1
            self._record_failure(job, message, reason="timeout")
        return reclaimed

    def _record_failure(self, job: ExtractionJob, error: str, reason: str | None = None) -> None:
        after: dict[str, Any] = {"status": JobStatus.FAILED.value, "fileName": job.file_name}
        if reason:
            after["reason"] = reason
        self._audit(
            job,
            before={"status": job.status.value},
            after=after,
            success=False,
            error_message=error,
        )
        Log.error(f"Job {job.id} failed: {error}")
        self._dispatcher.notify(
            job.user_id,
            JobOutcome.failure(job.id, job.file_name, error, job.project_id),
        )

    def _lost_race(self, job_id: str, target: JobStatus) -> InvalidTransitionError:
        current = self._job_repo.find_by_id(job_id)
        status = current.status.value if current is not None else "missing"
        return InvalidTransitionError(job_id, status, target.value)

    def _audit(
        self,
        job: ExtractionJob,
        *,
        before: dict[str, Any] | None,
        after: dict[str, Any],
        action: str = "UPDATE",
        success: bool = True,
        error_message: str | None = None,
    ) -> None:
        if job.file_id:
            after = {**after, "fileId": job.file_id}
        entry = AuditEntry(
            action=action,
            resource=_AUDIT_RESOURCE,
            actor_id=job.user_id,
            resource_id=job.id,
            before=before,
            after=after,
            project_id=job.project_id,
            success=success,
            error_message=error_message,
        )
        try:
            self._audit_repo.record(entry)
        except Exception as exc:
            Log.error(f"Failed to write audit entry for job {job.id}: {exc}")
