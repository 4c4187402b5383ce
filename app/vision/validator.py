"""Coerces a decoded model reply into ExtractedDocumentData.

Model output is loosely structured, so unknown keys are dropped, scalar
values are stringified, empty strings become None and confidence is
clamped to [0, 1]. Nothing here raises on bad shapes.
"""

import math
from typing import Any

from app.vision.models import (
    DocumentDates,
    DrawingInfo,
    ExtractedDocumentData,
    LocationInfo,
    ProjectMatch,
)


def build_extracted_data(data: dict[str, Any]) -> ExtractedDocumentData:
    return ExtractedDocumentData(
        project_match=_build_project_match(data.get("projectMatch")),
        drawing_info=_build_drawing_info(data.get("drawingInfo")),
        location_info=_build_location_info(data.get("locationInfo")),
        dates=_build_dates(data.get("dates")),
        raw_text=_text(data.get("rawText")),
        error=_text(data.get("error")),
    )


def _build_project_match(raw: Any) -> ProjectMatch | None:
    if not isinstance(raw, dict):
        return None
    name = _text(raw.get("name"))
    if name is None:
        return None
    return ProjectMatch(
        id=_text(raw.get("id")),
        name=name,
        confidence=_confidence(raw.get("confidence")),
    )


def _build_drawing_info(raw: Any) -> DrawingInfo | None:
    if not isinstance(raw, dict):
        return None
    info = DrawingInfo(
        drawing_number=_text(raw.get("drawingNumber")),
        sheet_number=_text(raw.get("sheetNumber")),
        sheet_title=_text(raw.get("sheetTitle")),
        revision=_text(raw.get("revision")),
        scale=_text(raw.get("scale")),
        discipline=_text(raw.get("discipline")),
    )
    return None if info == DrawingInfo() else info


def _build_location_info(raw: Any) -> LocationInfo | None:
    if not isinstance(raw, dict):
        return None
    info = LocationInfo(
        building=_text(raw.get("building")),
        floor=_text(raw.get("floor")),
        zone=_text(raw.get("zone")),
        room=_text(raw.get("room")),
    )
    return None if info == LocationInfo() else info


def _build_dates(raw: Any) -> DocumentDates | None:
    if not isinstance(raw, dict):
        return None
    dates = DocumentDates(
        document_date=_text(raw.get("documentDate")),
        revision_date=_text(raw.get("revisionDate")),
        approval_date=_text(raw.get("approvalDate")),
    )
    return None if dates == DocumentDates() else dates


def _text(raw: Any) -> str | None:
    if raw is None or isinstance(raw, (dict, list)):
        return None
    value = str(raw).strip()
    return value or None


def _confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return max(0.0, min(1.0, value))
