from typing import Any

from app.config.settings import Settings
from app.database.models import ExtractionJob
from app.database.repositories.document_metadata_repository import DocumentMetadataRepository
from app.database.repositories.file_repository import FileRepository
from app.logging.logger import Log
from app.pdf.factory import PdfRendererFactory
from app.pdf.page_counter import PdfPageCounter
from app.processor.pipeline import PipelineContext, PipelineStep
from app.processor.steps import (
    ExtractStep,
    LoadProjectsStep,
    LoadSourceStep,
    PersistMetadataStep,
    ProgressReporter,
)
from app.storage.factory import StorageFactory
from app.vision.aggregator import MultiPageAggregator
from app.vision.factory import VisionExtractorFactory


class Processor:
    """Runs the extraction pipeline for one job.

    Pipeline: load source -> load projects -> extract -> persist metadata.
    Returns the JSON result to store on the job.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, job: ExtractionJob) -> dict[str, Any]:
        Log.info(f"Processing job {job.id} ({job.file_name}, all_pages={job.all_pages})")
        context = PipelineContext(job=job)
        for step in self._steps:
            context = step.run(context)
        return context.result


def build_processor(
    settings: Settings,
    report_progress: ProgressReporter,
    file_repo: FileRepository | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    file_repo = file_repo if file_repo is not None else FileRepository()
    renderer = PdfRendererFactory.create(settings)
    extractor = VisionExtractorFactory.create(settings, renderer)
    aggregator = MultiPageAggregator(
        extractor=extractor,
        renderer=renderer,
        page_counter=PdfPageCounter(),
        page_timeout_seconds=settings.ocr_page_timeout_seconds,
        batch_delay_seconds=settings.ocr_batch_delay_seconds,
    )
    return Processor(
        [
            LoadSourceStep(StorageFactory.create(settings)),
            LoadProjectsStep(file_repo),
            ExtractStep(
                extractor,
                aggregator,
                report_progress,
                max_pages=settings.ocr_max_pages,
                concurrency=settings.ocr_concurrency,
            ),
            PersistMetadataStep(DocumentMetadataRepository(), provider=settings.vision_provider),
        ]
    )
