from unittest.mock import MagicMock

import pytest

from app.pdf.factory import PdfRendererFactory
from app.pdf.pdfplumber_adapter import PdfPlumberRenderer
from app.pdf.pymupdf_adapter import PyMuPdfRenderer
from app.pdf.renderer import FallbackPdfRenderer


def _make_settings(engines: str) -> MagicMock:
    return MagicMock(
        pdf_render_engines=engines,
        pdf_render_scale=2.0,
        pdf_render_timeout_seconds=120,
    )


class TestPdfRendererFactory:
    def test_default_chain_order(self) -> None:
        renderer = PdfRendererFactory.create(_make_settings("pymupdf,pdfplumber"))
        assert isinstance(renderer, FallbackPdfRenderer)
        assert [type(r) for r in renderer._renderers] == [PyMuPdfRenderer, PdfPlumberRenderer]

    def test_single_engine(self) -> None:
        renderer = PdfRendererFactory.create(_make_settings("pdfplumber"))
        assert [type(r) for r in renderer._renderers] == [PdfPlumberRenderer]

    def test_is_case_insensitive_and_trims(self) -> None:
        renderer = PdfRendererFactory.create(_make_settings(" PyMuPDF , PdfPlumber "))
        assert [r.name for r in renderer._renderers] == ["pymupdf", "pdfplumber"]

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfRendererFactory.create(_make_settings("pymupdf,ghostscript"))

    def test_raises_for_empty_engine_list(self) -> None:
        with pytest.raises(ValueError):
            PdfRendererFactory.create(_make_settings(" , "))
