from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ProjectInfo:
    """A known project offered to the model for matching."""

    id: str
    name: str
    address: str | None = None


@dataclass(frozen=True)
class ProjectMatch:
    name: str
    confidence: float = 0.0
    id: str | None = None


@dataclass(frozen=True)
class DrawingInfo:
    drawing_number: str | None = None
    sheet_number: str | None = None
    sheet_title: str | None = None
    revision: str | None = None
    scale: str | None = None
    discipline: str | None = None


@dataclass(frozen=True)
class LocationInfo:
    building: str | None = None
    floor: str | None = None
    zone: str | None = None
    room: str | None = None


@dataclass(frozen=True)
class DocumentDates:
    document_date: str | None = None
    revision_date: str | None = None
    approval_date: str | None = None


@dataclass(frozen=True)
class ExtractedDocumentData:
    """Everything pulled from one page. Partial data is normal."""

    project_match: ProjectMatch | None = None
    drawing_info: DrawingInfo | None = None
    location_info: LocationInfo | None = None
    dates: DocumentDates | None = None
    raw_text: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys downstream readers expect."""
        data: dict[str, Any] = {}
        if self.project_match is not None:
            data["projectMatch"] = _compact(
                {
                    "id": self.project_match.id,
                    "name": self.project_match.name,
                    "confidence": self.project_match.confidence,
                }
            )
        if self.drawing_info is not None:
            data["drawingInfo"] = _compact(
                {
                    "drawingNumber": self.drawing_info.drawing_number,
                    "sheetNumber": self.drawing_info.sheet_number,
                    "sheetTitle": self.drawing_info.sheet_title,
                    "revision": self.drawing_info.revision,
                    "scale": self.drawing_info.scale,
                    "discipline": self.drawing_info.discipline,
                }
            )
        if self.location_info is not None:
            data["locationInfo"] = _compact(
                {
                    "building": self.location_info.building,
                    "floor": self.location_info.floor,
                    "zone": self.location_info.zone,
                    "room": self.location_info.room,
                }
            )
        if self.dates is not None:
            data["dates"] = _compact(
                {
                    "documentDate": self.dates.document_date,
                    "revisionDate": self.dates.revision_date,
                    "approvalDate": self.dates.approval_date,
                }
            )
        if self.raw_text is not None:
            data["rawText"] = self.raw_text
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class PageExtraction:
    page_number: int
    data: ExtractedDocumentData

    def to_dict(self) -> dict[str, Any]:
        return {"pageNumber": self.page_number, "data": self.data.to_dict()}


@dataclass(frozen=True)
class ExtractionSummary:
    project_match: ProjectMatch | None = None
    unique_drawings: list[str] = field(default_factory=list)
    sheet_titles: list[str] = field(default_factory=list)
    disciplines: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "uniqueDrawings": list(self.unique_drawings),
            "sheetTitles": list(self.sheet_titles),
            "disciplines": list(self.disciplines),
        }
        if self.project_match is not None:
            data["projectMatch"] = ExtractedDocumentData(project_match=self.project_match).to_dict()[
                "projectMatch"
            ]
        return data


@dataclass(frozen=True)
class MultiPageExtractionResult:
    """Persisted job result shape: pageCount, pages, summary, error."""

    page_count: int
    pages: list[PageExtraction] = field(default_factory=list)
    summary: ExtractionSummary | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "pageCount": self.page_count,
            "pages": [page.to_dict() for page in self.pages],
        }
        if self.summary is not None:
            data["summary"] = self.summary.to_dict()
        if self.error is not None:
            data["error"] = self.error
        return data


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}
