import io

import pdfplumber

from app.pdf.base import BasePdfRenderer, page_limit
from app.pdf.exceptions import PdfRenderError

_POINTS_PER_INCH = 72


class PdfPlumberRenderer(BasePdfRenderer):
    """Renders PDF pages through pdfplumber's pypdfium2 backend.

    Slower than PyMuPDF but tolerant of fonts and content streams the
    pixmap renderer rejects, so it serves as the fallback strategy.
    """

    name = "pdfplumber"

    def render(
        self,
        pdf_bytes: bytes,
        *,
        first_page_only: bool = False,
        max_pages: int | None = None,
    ) -> list[bytes]:
        resolution = int(_POINTS_PER_INCH * self._scale)
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                pages = pdf.pages[: page_limit(first_page_only, max_pages)]
                return [self._to_png(page, resolution) for page in pages]
        except PdfRenderError:
            raise
        except Exception as exc:
            raise PdfRenderError(f"pdfplumber rendering failed: {exc}") from exc

    @staticmethod
    def _to_png(page: pdfplumber.page.Page, resolution: int) -> bytes:
        image = page.to_image(resolution=resolution, antialias=True)
        buf = io.BytesIO()
        image.original.save(buf, format="PNG")
        return buf.getvalue()
