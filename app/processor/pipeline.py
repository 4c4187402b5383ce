from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from app.database.models import ExtractionJob
from app.vision.models import ExtractedDocumentData, MultiPageExtractionResult, ProjectInfo


@dataclass(slots=True)
class PipelineContext:
    job: ExtractionJob
    file_bytes: bytes = b""
    projects: list[ProjectInfo] = field(default_factory=list)
    extraction: ExtractedDocumentData | MultiPageExtractionResult | None = None
    result: dict[str, Any] = field(default_factory=dict)


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
