from abc import ABC, abstractmethod


class BasePdfRenderer(ABC):
    """Contract for all PDF rasterization adapters."""

    name: str = ""

    def __init__(self, scale: float = 2.0) -> None:
        self._scale = scale

    @abstractmethod
    def render(
        self,
        pdf_bytes: bytes,
        *,
        first_page_only: bool = False,
        max_pages: int | None = None,
    ) -> list[bytes]:
        """Rasterize PDF pages into PNG images.

        Args:
            pdf_bytes: Raw PDF file content.
            first_page_only: Render only page 1.
            max_pages: Stop after this many pages. None renders all.

        Returns:
            PNG bytes, one entry per page, in page order.

        Raises:
            PdfRenderError: if rendering fails for any reason.
        """


def page_limit(first_page_only: bool, max_pages: int | None) -> int | None:
    if first_page_only:
        return 1
    return max_pages
