"""Vision-model extraction of title-block metadata from page images."""

import base64
from dataclasses import replace
from pathlib import Path

from app.logging.logger import Log
from app.pdf.exceptions import PdfRenderError
from app.pdf.renderer import FallbackPdfRenderer
from app.vision.client_base import BaseVisionClient
from app.vision.disciplines import infer_discipline
from app.vision.exceptions import VisionError
from app.vision.models import ExtractedDocumentData, ProjectInfo
from app.vision.project_matcher import match_project_to_list
from app.vision.prompt_loader import build_extraction_prompt, load_prompt_template
from app.vision.response_parser import parse_extraction_response

PDF_MIME_TYPE = "application/pdf"

SUPPORTED_MIME_TYPES = frozenset(
    {
        PDF_MIME_TYPE,
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/tiff",
    }
)

UNEXPECTED_ERROR = "An unexpected error occurred during document analysis."


def is_ocr_supported(mime_type: str) -> bool:
    return mime_type.lower() in SUPPORTED_MIME_TYPES


def to_data_url(image_bytes: bytes, mime_type: str = "image/png") -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"


class VisionExtractor:
    """Turns one page image into ExtractedDocumentData.

    Provider and parse failures are returned in the ``error`` field, never
    raised, so one bad page cannot take down a multi-page run.
    """

    def __init__(
        self,
        *,
        client: BaseVisionClient,
        renderer: FallbackPdfRenderer,
        model: str,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._renderer = renderer
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._max_tokens = max_tokens
        self._prompt_template = load_prompt_template(prompt_template_path)

    @property
    def is_configured(self) -> bool:
        return self._client.is_configured

    def build_prompt(self, projects: list[ProjectInfo]) -> str:
        return build_extraction_prompt(self._prompt_template, projects)

    def extract_page(
        self,
        image_bytes: bytes,
        projects: list[ProjectInfo],
        *,
        mime_type: str = "image/png",
        page_label: str | None = None,
        prompt: str | None = None,
    ) -> ExtractedDocumentData:
        """Run the vision model on one image and post-process the reply."""
        text = prompt if prompt is not None else self.build_prompt(projects)
        if page_label:
            text = f"{page_label}:\n\n{text}"
        try:
            content = self._client.create_vision_completion(
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                prompt=text,
                image_url=to_data_url(image_bytes, mime_type),
            )
        except VisionError as exc:
            Log.error(f"Vision extraction failed ({type(exc).__name__}): {exc}")
            return ExtractedDocumentData(error=exc.user_message)
        except Exception as exc:
            Log.exception(f"Unexpected vision extraction failure: {exc}")
            return ExtractedDocumentData(error=UNEXPECTED_ERROR)

        Log.debug(f"Vision raw response: {content[:200]}")
        data = parse_extraction_response(content)
        return self._post_process(data, projects)

    def extract_document(
        self,
        file_bytes: bytes,
        mime_type: str,
        projects: list[ProjectInfo],
    ) -> ExtractedDocumentData:
        """Single-page path: first PDF page, or the image itself."""
        mime_type = mime_type.lower()
        if mime_type == PDF_MIME_TYPE:
            try:
                image = self._renderer.render_first_page(file_bytes)
            except PdfRenderError as exc:
                Log.error(f"PDF to image conversion failed: {exc}")
                return ExtractedDocumentData(error=exc.user_message)
            return self.extract_page(image, projects)
        if mime_type.startswith("image/") and is_ocr_supported(mime_type):
            return self.extract_page(file_bytes, projects, mime_type=mime_type)
        return ExtractedDocumentData(error=f"Unsupported file type: {mime_type}")

    @staticmethod
    def _post_process(
        data: ExtractedDocumentData,
        projects: list[ProjectInfo],
    ) -> ExtractedDocumentData:
        data = match_project_to_list(data, projects)
        info = data.drawing_info
        if info is not None and info.drawing_number and not info.discipline:
            discipline = infer_discipline(info.drawing_number)
            if discipline:
                data = replace(data, drawing_info=replace(info, discipline=discipline))
        return data
