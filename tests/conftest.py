import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


def _pdf(*pages: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page drawing sheet."""
    return _pdf("A1.01 FLOOR PLAN - LEVEL 1")


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page drawing set."""
    return _pdf("A1.01 FLOOR PLAN", "A2.01 ELEVATIONS")


@pytest.fixture()
def three_page_pdf_bytes() -> bytes:
    return _pdf("C0.00 SITE PLAN", "A1.01 FLOOR PLAN", "S1.01 FOUNDATION PLAN")


@pytest.fixture()
def invalid_pdf_bytes() -> bytes:
    return b"this is not a pdf at all"
