import os
import uuid
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from app.config.settings import Settings
from app.database.connection import apply_schema, close_pool, get_connection, init_pool
from app.database.models import ExtractionJob, NewJob
from app.database.repositories.job_repository import JobRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "construction_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            apply_schema(conn)
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(integration_pool: None) -> Generator[list[tuple[str, str]], None, None]:
    cleanup: list[tuple[str, str]] = []
    yield cleanup
    if not cleanup:
        return
    # Children before parents
    order = ["ocr_jobs", "document_metadata", "audit_logs", "notifications", "files", "projects"]
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table in order:
                for cleanup_table, key in cleanup:
                    if cleanup_table != table:
                        continue
                    if table == "document_metadata":
                        cur.execute("DELETE FROM document_metadata WHERE file_id = %s", (key,))
                    elif table == "audit_logs":
                        cur.execute("DELETE FROM audit_logs WHERE resource_id = %s", (key,))
                    elif table == "notifications":
                        cur.execute("DELETE FROM notifications WHERE user_id = %s", (key,))
                    else:
                        cur.execute(f"DELETE FROM {table} WHERE id = %s", (key,))
        conn.commit()


@pytest.fixture
def seed_file(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, str]],
) -> tuple[str, str]:
    """Insert a project and one file under it; returns (project_id, file_id)."""
    project_id = f"proj-{uuid.uuid4()}"
    file_id = f"file-{uuid.uuid4()}"
    with db_conn.cursor() as cur:
        cur.execute(
            "INSERT INTO projects (id, name, address) VALUES (%s, %s, %s)",
            (project_id, "Riverside Tower", "100 River Rd"),
        )
        cur.execute(
            """
            INSERT INTO files (id, project_id, name, storage_path, mime_type)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (file_id, project_id, "plans.pdf", f"{project_id}/plans.pdf", "application/pdf"),
        )
    db_conn.commit()
    integration_cleanup.append(("projects", project_id))
    integration_cleanup.append(("files", file_id))
    integration_cleanup.append(("document_metadata", file_id))
    return project_id, file_id


@pytest.fixture
def seed_job(
    seed_file: tuple[str, str],
    integration_cleanup: list[tuple[str, str]],
) -> ExtractionJob:
    project_id, file_id = seed_file
    user_id = f"user-{uuid.uuid4()}"
    job = JobRepository().create(
        NewJob(
            user_id=user_id,
            file_name="plans.pdf",
            storage_path=f"{project_id}/plans.pdf",
            file_id=file_id,
            project_id=project_id,
        )
    )
    integration_cleanup.append(("ocr_jobs", job.id))
    integration_cleanup.append(("audit_logs", job.id))
    integration_cleanup.append(("notifications", user_id))
    return job


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def sample_pdf_on_disk(
    seed_job: ExtractionJob,
    files_root: Path,
    multi_page_pdf_bytes: bytes,
) -> Path:
    assert seed_job.storage_path is not None
    path = files_root / seed_job.storage_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(multi_page_pdf_bytes)
    return path
