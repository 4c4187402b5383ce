from collections.abc import Callable
from typing import Any

from app.database.repositories.document_metadata_repository import DocumentMetadataRepository
from app.database.repositories.file_repository import FileRepository
from app.logging.logger import Log
from app.processor.exceptions import ExtractionFailedError
from app.processor.metadata import build_metadata_record
from app.processor.pipeline import PipelineContext, PipelineStep
from app.storage.base import BaseStorage
from app.storage.exceptions import StorageError
from app.vision.aggregator import DEFAULT_CONCURRENCY, DEFAULT_MAX_PAGES, MultiPageAggregator
from app.vision.extractor import PDF_MIME_TYPE, VisionExtractor

ProgressReporter = Callable[[str, int, int], Any]


class LoadSourceStep(PipelineStep):
    def __init__(self, storage: BaseStorage) -> None:
        self._storage = storage

    def run(self, context: PipelineContext) -> PipelineContext:
        job = context.job
        if not job.storage_path:
            raise StorageError("No storage path for job")
        context.file_bytes = self._storage.download(job.storage_path)
        Log.info(f"Job {job.id}: downloaded {len(context.file_bytes)} bytes")
        return context


class LoadProjectsStep(PipelineStep):
    def __init__(self, file_repo: FileRepository) -> None:
        self._file_repo = file_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        project_id = context.job.project_id
        if project_id:
            project = self._file_repo.find_project(project_id)
            context.projects = [project] if project is not None else []
        return context


class ExtractStep(PipelineStep):
    """Multi-page extraction for PDFs submitted with all_pages, otherwise one page.

    Page-level errors stay in the result. A result-level error fails the job.
    """

    def __init__(
        self,
        extractor: VisionExtractor,
        aggregator: MultiPageAggregator,
        report_progress: ProgressReporter,
        max_pages: int = DEFAULT_MAX_PAGES,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self._extractor = extractor
        self._aggregator = aggregator
        self._report_progress = report_progress
        self._max_pages = max_pages
        self._concurrency = concurrency

    def run(self, context: PipelineContext) -> PipelineContext:
        job = context.job
        mime_type = (job.file_type or PDF_MIME_TYPE).lower()

        if job.all_pages and mime_type == PDF_MIME_TYPE:
            result = self._aggregator.extract_all(
                context.file_bytes,
                context.projects,
                max_pages=self._max_pages,
                concurrency=self._concurrency,
                on_progress=lambda processed, total: self._report_progress(
                    job.id, processed, total
                ),
            )
            if result.error:
                raise ExtractionFailedError(result.error)
            context.extraction = result
            context.result = result.to_dict()
            failed = sum(1 for page in result.pages if page.data.error)
            Log.info(
                f"Job {job.id}: extracted {len(result.pages)} of {result.page_count} pages "
                f"({failed} with errors)"
            )
            return context

        data = self._extractor.extract_document(context.file_bytes, mime_type, context.projects)
        if data.error:
            raise ExtractionFailedError(data.error)
        self._report_progress(job.id, 1, 1)
        context.extraction = data
        context.result = data.to_dict()
        return context


class PersistMetadataStep(PipelineStep):
    def __init__(self, metadata_repo: DocumentMetadataRepository, provider: str) -> None:
        self._metadata_repo = metadata_repo
        self._provider = provider

    def run(self, context: PipelineContext) -> PipelineContext:
        job = context.job
        if not job.file_id or context.extraction is None:
            return context
        record = build_metadata_record(
            job.file_id, context.extraction, context.result, self._provider
        )
        try:
            self._metadata_repo.upsert(record)
            Log.info(f"Saved metadata for file {job.file_id}")
        except Exception as exc:
            Log.error(f"Failed to save metadata for file {job.file_id}: {exc}")
        return context
