from typing import Any

from app.database.models import DocumentMetadataRecord
from app.vision.models import ExtractedDocumentData, MultiPageExtractionResult


def _single(values: list[str]) -> str | None:
    return values[0] if len(values) == 1 else None


def build_metadata_record(
    file_id: str,
    extraction: ExtractedDocumentData | MultiPageExtractionResult,
    raw_response: dict[str, Any],
    provider: str,
) -> DocumentMetadataRecord:
    """Flatten an extraction into the per-file document_metadata row.

    A multi-page run only fills drawing number, discipline and sheet title,
    and only when every page agreed on a single value.
    """
    if isinstance(extraction, MultiPageExtractionResult):
        summary = extraction.summary
        if summary is None:
            return DocumentMetadataRecord(
                file_id=file_id, ocr_provider=provider, raw_response=raw_response
            )
        match = summary.project_match
        return DocumentMetadataRecord(
            file_id=file_id,
            drawing_number=_single(summary.unique_drawings),
            sheet_title=_single(summary.sheet_titles),
            discipline=_single(summary.disciplines),
            ocr_provider=provider,
            ocr_confidence=match.confidence if match is not None else None,
            raw_response=raw_response,
        )

    drawing = extraction.drawing_info
    location = extraction.location_info
    match = extraction.project_match
    return DocumentMetadataRecord(
        file_id=file_id,
        drawing_number=drawing.drawing_number if drawing else None,
        sheet_number=drawing.sheet_number if drawing else None,
        sheet_title=drawing.sheet_title if drawing else None,
        revision=drawing.revision if drawing else None,
        discipline=drawing.discipline if drawing else None,
        scale=drawing.scale if drawing else None,
        building=location.building if location else None,
        floor=location.floor if location else None,
        zone=location.zone if location else None,
        room=location.room if location else None,
        ocr_provider=provider,
        ocr_confidence=match.confidence if match is not None else None,
        raw_response=raw_response,
    )
