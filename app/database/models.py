from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.jobs.state import JobStatus


@dataclass
class ExtractionJob:
    """Represents a row from the ocr_jobs table."""

    id: str
    user_id: str
    file_name: str
    status: JobStatus
    file_id: str | None = None
    project_id: str | None = None
    file_type: str | None = None
    storage_path: str | None = None
    all_pages: bool = True
    progress: int = 0
    processed_pages: int = 0
    total_pages: int | None = None
    error: str | None = None
    result: dict[str, Any] | None = None
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class NewJob:
    """Fields supplied when a document is submitted for analysis."""

    user_id: str
    file_name: str
    storage_path: str
    file_type: str = "application/pdf"
    file_id: str | None = None
    project_id: str | None = None
    all_pages: bool = True


@dataclass
class DocumentMetadataRecord:
    """Represents a row from the document_metadata table."""

    file_id: str
    drawing_number: str | None = None
    sheet_number: str | None = None
    sheet_title: str | None = None
    revision: str | None = None
    discipline: str | None = None
    scale: str | None = None
    building: str | None = None
    floor: str | None = None
    zone: str | None = None
    room: str | None = None
    ocr_provider: str = "openai"
    ocr_confidence: float | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuditEntry:
    """One append-only row for the audit_logs table."""

    action: str
    resource: str
    actor_id: str
    resource_id: str
    before: dict[str, Any] | None = None
    after: dict[str, Any] | None = None
    project_id: str | None = None
    success: bool = True
    error_message: str | None = None


@dataclass(frozen=True)
class DeviceToken:
    user_id: str
    token: str
    platform: str
