"""Fan-out of vision extraction over the pages of a drawing set."""

import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from app.logging.logger import Log
from app.pdf.exceptions import PdfRenderError
from app.pdf.page_counter import PdfPageCounter
from app.pdf.renderer import FallbackPdfRenderer
from app.vision.exceptions import VisionNotConfiguredError
from app.vision.extractor import PDF_MIME_TYPE, VisionExtractor
from app.vision.models import (
    ExtractedDocumentData,
    ExtractionSummary,
    MultiPageExtractionResult,
    PageExtraction,
    ProjectInfo,
    ProjectMatch,
)

ProgressCallback = Callable[[int, int], None]

DEFAULT_MAX_PAGES = 50
DEFAULT_CONCURRENCY = 3
DEFAULT_BATCH_DELAY_SECONDS = 0.5


class MultiPageAggregator:
    """Extracts every page of a PDF in bounded concurrent batches.

    A failing page only sets that page's ``error``; the run continues. The
    batch size exists to respect the provider's rate limits.
    """

    def __init__(
        self,
        *,
        extractor: VisionExtractor,
        renderer: FallbackPdfRenderer,
        page_counter: PdfPageCounter,
        page_timeout_seconds: float | None = None,
        batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._extractor = extractor
        self._renderer = renderer
        self._page_counter = page_counter
        self._page_timeout_seconds = page_timeout_seconds
        self._batch_delay_seconds = batch_delay_seconds
        self._sleep = sleep

    def extract_all(
        self,
        pdf_bytes: bytes,
        projects: list[ProjectInfo],
        *,
        max_pages: int = DEFAULT_MAX_PAGES,
        concurrency: int = DEFAULT_CONCURRENCY,
        on_progress: ProgressCallback | None = None,
        mime_type: str = PDF_MIME_TYPE,
    ) -> MultiPageExtractionResult:
        if mime_type.lower() != PDF_MIME_TYPE:
            return self._extract_single(pdf_bytes, mime_type, projects)
        if not self._extractor.is_configured:
            Log.error("Vision client is not configured; skipping extraction")
            return MultiPageExtractionResult(
                page_count=0, error=VisionNotConfiguredError.user_message
            )

        page_count = self._page_counter.count(pdf_bytes)
        try:
            images = self._renderer.render(pdf_bytes, max_pages=max_pages)
        except PdfRenderError as exc:
            Log.error(f"PDF to images conversion failed: {exc}")
            return MultiPageExtractionResult(page_count=0, error=exc.user_message)

        # zero from the counter means unknown; trust what rendered
        page_count = max(page_count, len(images))
        images = images[:max_pages]
        total = len(images)
        Log.info(f"Extracting {total} of {page_count} pages, concurrency={concurrency}")

        prompt = self._extractor.build_prompt(projects)
        batch_size = max(1, concurrency)
        results: list[PageExtraction] = []
        for start in range(0, total, batch_size):
            batch = images[start : start + batch_size]
            results.extend(
                self._run_batch(batch, start + 1, page_count, projects, prompt)
            )
            self._report_progress(on_progress, len(results), total)
            if start + batch_size < total:
                self._sleep(self._batch_delay_seconds)

        return MultiPageExtractionResult(
            page_count=page_count,
            pages=results,
            summary=summarize_pages(results),
        )

    def _run_batch(
        self,
        batch: list[bytes],
        first_page_number: int,
        page_count: int,
        projects: list[ProjectInfo],
        prompt: str,
    ) -> list[PageExtraction]:
        executor = ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="ocr-page")
        try:
            futures: list[tuple[int, Future[ExtractedDocumentData]]] = [
                (
                    first_page_number + offset,
                    executor.submit(
                        self._extractor.extract_page,
                        image,
                        projects,
                        page_label=f"Page {first_page_number + offset} of {page_count}",
                        prompt=prompt,
                    ),
                )
                for offset, image in enumerate(batch)
            ]
            deadline = (
                time.monotonic() + self._page_timeout_seconds
                if self._page_timeout_seconds is not None
                else None
            )
            return [self._collect(page_number, future, deadline) for page_number, future in futures]
        finally:
            # a hung page must not hold the run; its thread is abandoned
            executor.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _collect(
        page_number: int,
        future: Future[ExtractedDocumentData],
        deadline: float | None,
    ) -> PageExtraction:
        timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
        try:
            data = future.result(timeout=timeout)
        except FutureTimeoutError:
            Log.error(f"Page {page_number} analysis timed out")
            data = ExtractedDocumentData(error=f"Page {page_number} analysis timed out")
        except Exception as exc:
            Log.error(f"Page {page_number} analysis error: {exc}")
            data = ExtractedDocumentData(error=f"Page analysis failed: {exc}")
        return PageExtraction(page_number=page_number, data=data)

    @staticmethod
    def _report_progress(callback: ProgressCallback | None, processed: int, total: int) -> None:
        if callback is None:
            return
        try:
            callback(processed, total)
        except Exception as exc:
            Log.error(f"Progress callback error: {exc}")

    def _extract_single(
        self,
        file_bytes: bytes,
        mime_type: str,
        projects: list[ProjectInfo],
    ) -> MultiPageExtractionResult:
        data = self._extractor.extract_document(file_bytes, mime_type, projects)
        pages = [PageExtraction(page_number=1, data=data)]
        return MultiPageExtractionResult(page_count=1, pages=pages, summary=summarize_pages(pages))


def summarize_pages(pages: list[PageExtraction]) -> ExtractionSummary:
    """Union drawing numbers, sheet titles and disciplines across pages.

    The project match is the single highest-confidence match seen.
    """
    drawings: dict[str, None] = {}
    titles: dict[str, None] = {}
    disciplines: dict[str, None] = {}
    best_match: ProjectMatch | None = None

    for page in pages:
        info = page.data.drawing_info
        if info is not None:
            if info.drawing_number:
                drawings.setdefault(info.drawing_number)
            if info.sheet_title:
                titles.setdefault(info.sheet_title)
            if info.discipline:
                disciplines.setdefault(info.discipline)
        match = page.data.project_match
        if match is not None and (best_match is None or match.confidence > best_match.confidence):
            best_match = match

    return ExtractionSummary(
        project_match=best_match,
        unique_drawings=list(drawings),
        sheet_titles=list(titles),
        disciplines=list(disciplines),
    )
