import uuid
from datetime import datetime
from typing import Any

from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.models import ExtractionJob, NewJob
from app.jobs.state import JobStatus

_COLUMNS = """
    id, user_id, file_id, project_id, file_name, file_type, storage_path,
    all_pages, status, progress, processed_pages, total_pages, error, result,
    created_at, started_at, completed_at
"""


class JobRepository:
    """Database operations for the ocr_jobs table.

    Status writes are compare-and-set: the UPDATE only matches while the row
    is still in one of the expected statuses, and callers learn from the
    return value whether they won.
    """

    def create(self, new_job: NewJob) -> ExtractionJob:
        job_id = str(uuid.uuid4())
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    INSERT INTO ocr_jobs
                        (id, user_id, file_id, project_id, file_name, file_type,
                         storage_path, all_pages, status)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {_COLUMNS}
                    """,
                    (
                        job_id,
                        new_job.user_id,
                        new_job.file_id,
                        new_job.project_id,
                        new_job.file_name,
                        new_job.file_type,
                        new_job.storage_path,
                        new_job.all_pages,
                        JobStatus.PENDING.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError("INSERT into ocr_jobs returned no row")
        return _row_to_job(row)

    def find_by_id(self, job_id: str) -> ExtractionJob | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(f"SELECT {_COLUMNS} FROM ocr_jobs WHERE id = %s", (job_id,))
                row = cur.fetchone()
        return _row_to_job(row) if row is not None else None

    def next_pending_id(self) -> str | None:
        """Oldest PENDING job id. Claiming happens through mark_processing."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id FROM ocr_jobs
                    WHERE status = %s
                    ORDER BY created_at
                    LIMIT 1
                    """,
                    (JobStatus.PENDING.value,),
                )
                row = cur.fetchone()
        return str(row[0]) if row is not None else None

    def mark_processing(self, job_id: str) -> bool:
        return self._transition(
            job_id,
            sources=(JobStatus.PENDING,),
            assignments="status = %s, started_at = NOW()",
            params=(JobStatus.PROCESSING.value,),
        )

    def mark_completed(self, job_id: str, result: dict[str, Any]) -> bool:
        return self._transition(
            job_id,
            sources=(JobStatus.PROCESSING,),
            assignments="status = %s, completed_at = NOW(), result = %s, progress = 100",
            params=(JobStatus.COMPLETED.value, Jsonb(result)),
        )

    def mark_failed(self, job_id: str, error: str, sources: tuple[JobStatus, ...]) -> bool:
        return self._transition(
            job_id,
            sources=sources,
            assignments="status = %s, completed_at = NOW(), error = %s, progress = 0",
            params=(JobStatus.FAILED.value, error),
        )

    def update_progress(self, job_id: str, processed: int, total: int, progress: int) -> bool:
        """Write progress for a PROCESSING job without ever moving it backwards."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    UPDATE ocr_jobs
                    SET total_pages = GREATEST(%(total)s, processed_pages, %(processed)s),
                        processed_pages = GREATEST(processed_pages, %(processed)s),
                        progress = GREATEST(progress, %(progress)s)
                    WHERE id = %(id)s AND status = %(status)s
                    """,
                    {
                        "total": total,
                        "processed": processed,
                        "progress": progress,
                        "id": job_id,
                        "status": JobStatus.PROCESSING.value,
                    },
                )
                updated = cur.rowcount == 1
            conn.commit()
        return updated

    def find_stuck(self, started_before: datetime) -> list[ExtractionJob]:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM ocr_jobs
                    WHERE status = %s AND started_at < %s
                    ORDER BY started_at
                    """,
                    (JobStatus.PROCESSING.value, started_before),
                )
                rows = cur.fetchall()
        return [_row_to_job(row) for row in rows]

    def _transition(
        self,
        job_id: str,
        *,
        sources: tuple[JobStatus, ...],
        assignments: str,
        params: tuple[Any, ...],
    ) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"UPDATE ocr_jobs SET {assignments} WHERE id = %s AND status = ANY(%s)",
                    (*params, job_id, [s.value for s in sources]),
                )
                updated = cur.rowcount == 1
            conn.commit()
        return updated


def _row_to_job(row: dict[str, Any]) -> ExtractionJob:
    return ExtractionJob(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        file_id=row["file_id"],
        project_id=row["project_id"],
        file_name=row["file_name"],
        file_type=row["file_type"],
        storage_path=row["storage_path"],
        all_pages=row["all_pages"],
        status=JobStatus(row["status"]),
        progress=row["progress"],
        processed_pages=row["processed_pages"],
        total_pages=row["total_pages"],
        error=row["error"],
        result=row["result"],
        created_at=row["created_at"],
        started_at=row["started_at"],
        completed_at=row["completed_at"],
    )
