import io

import pymupdf
from pdfminer.pdfdocument import PDFDocument
from pdfminer.pdfpage import PDFPage
from pdfminer.pdfparser import PDFParser
from pdfminer.pdftypes import resolve1

from app.logging.logger import Log


class PdfPageCounter:
    """Counts PDF pages without rendering them.

    PyMuPDF is asked first. If it fails or reports zero pages the
    document is re-read with pdfminer's structure parser, which opens
    encrypted files with an empty password and rebuilds broken xref
    tables. Zero means the page count is unknown.
    """

    def count(self, pdf_bytes: bytes) -> int:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                if doc.page_count > 0:
                    return int(doc.page_count)
        except Exception as exc:
            Log.warning(f"pymupdf failed to get page count: {exc}")

        try:
            pages = self._count_structure(pdf_bytes)
            Log.info(f"pdfminer fallback succeeded, pages: {pages}")
            return pages
        except Exception as exc:
            Log.error(f"Both pymupdf and pdfminer failed to read PDF: {exc}")
            return 0

    @staticmethod
    def _count_structure(pdf_bytes: bytes) -> int:
        parser = PDFParser(io.BytesIO(pdf_bytes))
        document = PDFDocument(parser, password="")
        pages_node = resolve1(document.catalog.get("Pages"))
        if isinstance(pages_node, dict):
            count = resolve1(pages_node.get("Count"))
            if isinstance(count, int) and count > 0:
                return count
        return sum(1 for _ in PDFPage.create_pages(document))
