from app.config.settings import Settings
from app.pdf.base import BasePdfRenderer
from app.pdf.pdfplumber_adapter import PdfPlumberRenderer
from app.pdf.pymupdf_adapter import PyMuPdfRenderer
from app.pdf.renderer import FallbackPdfRenderer


class PdfRendererFactory:
    """Builds the ordered renderer chain from settings."""

    ADAPTERS: dict[str, type[BasePdfRenderer]] = {
        "pdfplumber": PdfPlumberRenderer,
        "pymupdf": PyMuPdfRenderer,
    }

    @classmethod
    def create(cls, settings: Settings) -> FallbackPdfRenderer:
        engines = [e.strip().lower() for e in settings.pdf_render_engines.split(",") if e.strip()]
        if not engines:
            raise ValueError("pdf_render_engines must name at least one engine")
        renderers: list[BasePdfRenderer] = []
        for engine in engines:
            adapter_cls = cls.ADAPTERS.get(engine)
            if adapter_cls is None:
                raise ValueError(
                    f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
                )
            renderers.append(adapter_cls(scale=settings.pdf_render_scale))
        return FallbackPdfRenderer(
            renderers,
            timeout_seconds=settings.pdf_render_timeout_seconds,
        )
