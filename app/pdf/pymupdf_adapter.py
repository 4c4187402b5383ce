import pymupdf

from app.pdf.base import BasePdfRenderer, page_limit
from app.pdf.exceptions import PdfRenderError


class PyMuPdfRenderer(BasePdfRenderer):
    """Renders PDF pages to PNG with PyMuPDF pixmaps."""

    name = "pymupdf"

    def render(
        self,
        pdf_bytes: bytes,
        *,
        first_page_only: bool = False,
        max_pages: int | None = None,
    ) -> list[bytes]:
        try:
            matrix = pymupdf.Matrix(self._scale, self._scale)
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                pages = list(doc)[: page_limit(first_page_only, max_pages)]
                return [page.get_pixmap(matrix=matrix, alpha=False).tobytes("png") for page in pages]
        except PdfRenderError:
            raise
        except Exception as exc:
            raise PdfRenderError(f"pymupdf rendering failed: {exc}") from exc
