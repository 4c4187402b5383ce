"""In-memory stand-ins for the database repositories.

They keep the compare-and-set and monotonic-progress behaviour of the SQL in
JobRepository so lifecycle properties can be tested without PostgreSQL.
"""

import itertools
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from app.database.models import (
    AuditEntry,
    DeviceToken,
    DocumentMetadataRecord,
    ExtractionJob,
    NewJob,
)
from app.jobs.state import JobStatus
from app.notifications.models import Notification
from app.vision.models import ProjectInfo


class FakeJobRepository:
    def __init__(self, now: datetime | None = None) -> None:
        self.jobs: dict[str, ExtractionJob] = {}
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.progress_writes: list[tuple[str, int, int, int]] = []
        self._lock = threading.Lock()
        self._sequence = itertools.count()

    def add(self, job: ExtractionJob) -> ExtractionJob:
        self.jobs[job.id] = job
        return job

    def create(self, new_job: NewJob) -> ExtractionJob:
        job = ExtractionJob(
            id=str(uuid.uuid4()),
            user_id=new_job.user_id,
            file_name=new_job.file_name,
            status=JobStatus.PENDING,
            file_id=new_job.file_id,
            project_id=new_job.project_id,
            file_type=new_job.file_type,
            storage_path=new_job.storage_path,
            all_pages=new_job.all_pages,
            created_at=self.now.replace(microsecond=next(self._sequence)),
        )
        return self.add(job)

    def find_by_id(self, job_id: str) -> ExtractionJob | None:
        job = self.jobs.get(job_id)
        return replace(job) if job is not None else None

    def next_pending_id(self) -> str | None:
        pending = [j for j in self.jobs.values() if j.status == JobStatus.PENDING]
        if not pending:
            return None
        return min(pending, key=lambda j: j.created_at or self.now).id

    def mark_processing(self, job_id: str) -> bool:
        return self._transition(
            job_id, (JobStatus.PENDING,), status=JobStatus.PROCESSING, started_at=self.now
        )

    def mark_completed(self, job_id: str, result: dict[str, Any]) -> bool:
        return self._transition(
            job_id,
            (JobStatus.PROCESSING,),
            status=JobStatus.COMPLETED,
            completed_at=self.now,
            result=result,
            progress=100,
        )

    def mark_failed(self, job_id: str, error: str, sources: tuple[JobStatus, ...]) -> bool:
        return self._transition(
            job_id,
            sources,
            status=JobStatus.FAILED,
            completed_at=self.now,
            error=error,
            progress=0,
        )

    def update_progress(self, job_id: str, processed: int, total: int, progress: int) -> bool:
        with self._lock:
            job = self.jobs.get(job_id)
            if job is None or job.status != JobStatus.PROCESSING:
                return False
            processed_pages = max(job.processed_pages, processed)
            self.jobs[job_id] = replace(
                job,
                total_pages=max(total, processed_pages),
                processed_pages=processed_pages,
                progress=max(job.progress, progress),
            )
            self.progress_writes.append((job_id, processed, total, progress))
            return True

    def find_stuck(self, started_before: datetime) -> list[ExtractionJob]:
        return [
            replace(j)
            for j in self.jobs.values()
            if j.status == JobStatus.PROCESSING
            and j.started_at is not None
            and j.started_at < started_before
        ]

    def _transition(
        self, job_id: str, sources: tuple[JobStatus, ...], **changes: Any
    ) -> bool:
        with self._lock:
            job = self.jobs.get(job_id)
            if job is None or job.status not in sources:
                return False
            self.jobs[job_id] = replace(job, **changes)
            return True


class FakeFileRepository:
    def __init__(
        self,
        file_ids: set[str] | None = None,
        projects: list[ProjectInfo] | None = None,
    ) -> None:
        self.file_ids = set(file_ids or ())
        self.projects = {p.id: p for p in projects or [] if p.id}

    def file_exists(self, file_id: str) -> bool:
        return file_id in self.file_ids

    def find_project(self, project_id: str) -> ProjectInfo | None:
        return self.projects.get(project_id)


class FakeAuditRepository:
    def __init__(self) -> None:
        self.entries: list[AuditEntry] = []

    def record(self, entry: AuditEntry) -> None:
        self.entries.append(entry)


class FakeNotificationRepository:
    def __init__(self, devices: list[DeviceToken] | None = None) -> None:
        self.notifications: list[Notification] = []
        self.devices = list(devices or [])
        self.deactivated: list[str] = []

    def create(self, notification: Notification) -> int:
        self.notifications.append(notification)
        return len(self.notifications)

    def active_device_tokens(self, user_id: str) -> list[DeviceToken]:
        return [
            d for d in self.devices if d.user_id == user_id and d.token not in self.deactivated
        ]

    def deactivate_token(self, token: str) -> None:
        self.deactivated.append(token)


class FakeDocumentMetadataRepository:
    def __init__(self) -> None:
        self.records: dict[str, DocumentMetadataRecord] = {}

    def upsert(self, record: DocumentMetadataRecord) -> None:
        self.records[record.file_id] = record


class RecordingTaskQueue:
    def __init__(self) -> None:
        self.enqueued: list[str] = []

    def enqueue(self, job_id: str) -> None:
        self.enqueued.append(job_id)

    def shutdown(self) -> None:
        pass
