from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.models import DocumentMetadataRecord


class DocumentMetadataRepository:
    """Database operations for the document_metadata table."""

    def upsert(self, record: DocumentMetadataRecord) -> None:
        """Create or replace the metadata row for ``record.file_id``."""
        with get_connection() as conn:
            conn.execute(
                """
                INSERT INTO document_metadata
                    (file_id, drawing_number, sheet_number, sheet_title, revision,
                     discipline, scale, building, floor, zone, room,
                     ocr_provider, ocr_confidence, raw_response, updated_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, NOW())
                ON CONFLICT (file_id) DO UPDATE SET
                    drawing_number = EXCLUDED.drawing_number,
                    sheet_number = EXCLUDED.sheet_number,
                    sheet_title = EXCLUDED.sheet_title,
                    revision = EXCLUDED.revision,
                    discipline = EXCLUDED.discipline,
                    scale = EXCLUDED.scale,
                    building = EXCLUDED.building,
                    floor = EXCLUDED.floor,
                    zone = EXCLUDED.zone,
                    room = EXCLUDED.room,
                    ocr_provider = EXCLUDED.ocr_provider,
                    ocr_confidence = EXCLUDED.ocr_confidence,
                    raw_response = EXCLUDED.raw_response,
                    updated_at = NOW()
                """,
                (
                    record.file_id,
                    record.drawing_number,
                    record.sheet_number,
                    record.sheet_title,
                    record.revision,
                    record.discipline,
                    record.scale,
                    record.building,
                    record.floor,
                    record.zone,
                    record.room,
                    record.ocr_provider,
                    record.ocr_confidence,
                    Jsonb(record.raw_response),
                ),
            )
            conn.commit()
