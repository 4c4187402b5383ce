from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError

from app.logging.logger import Log
from app.pdf.base import BasePdfRenderer, page_limit
from app.pdf.exceptions import PdfRenderError


class FallbackPdfRenderer:
    """Tries each renderer strategy in order and returns the first success.

    Every attempt runs under ``timeout_seconds``; a hung renderer counts as
    a failed attempt. When all strategies fail the collected causes are
    raised as a single PdfRenderError.
    """

    def __init__(
        self,
        renderers: list[BasePdfRenderer],
        timeout_seconds: float | None = None,
    ) -> None:
        if not renderers:
            raise ValueError("At least one PDF renderer is required")
        self._renderers = renderers
        self._timeout_seconds = timeout_seconds

    def render(
        self,
        pdf_bytes: bytes,
        *,
        first_page_only: bool = False,
        max_pages: int | None = None,
    ) -> list[bytes]:
        Log.debug(
            f"Rendering PDF ({len(pdf_bytes)} bytes), "
            f"first_page_only={first_page_only}, max_pages={max_pages}"
        )
        causes: list[str] = []
        for renderer in self._renderers:
            try:
                pages = self._render_with_timeout(
                    renderer, pdf_bytes, page_limit(first_page_only, max_pages)
                )
            except PdfRenderError as exc:
                Log.warning(f"Renderer '{renderer.name}' failed: {exc}")
                causes.append(str(exc))
                continue
            if not pages:
                Log.warning(f"Renderer '{renderer.name}' returned no pages")
                causes.append(f"{renderer.name}: PDF contains no pages")
                continue
            Log.info(f"Renderer '{renderer.name}' produced {len(pages)} page image(s)")
            return pages
        raise PdfRenderError("; ".join(causes))

    def render_first_page(self, pdf_bytes: bytes) -> bytes:
        return self.render(pdf_bytes, first_page_only=True)[0]

    def _render_with_timeout(
        self,
        renderer: BasePdfRenderer,
        pdf_bytes: bytes,
        limit: int | None,
    ) -> list[bytes]:
        if self._timeout_seconds is None:
            return renderer.render(pdf_bytes, max_pages=limit)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"render-{renderer.name}")
        future = executor.submit(renderer.render, pdf_bytes, max_pages=limit)
        try:
            return future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError as exc:
            raise PdfRenderError(
                f"{renderer.name} rendering timed out after {self._timeout_seconds}s"
            ) from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
