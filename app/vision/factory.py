from typing import ClassVar

from app.config.settings import Settings
from app.pdf.renderer import FallbackPdfRenderer
from app.vision.client_base import BaseVisionClient
from app.vision.example_client_adapter import ExampleVisionAdapter
from app.vision.extractor import VisionExtractor
from app.vision.openai_client_adapter import OpenAIVisionAdapter


class VisionExtractorFactory:
    """Creates the configured vision extractor."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("example", "openai", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings, renderer: FallbackPdfRenderer) -> VisionExtractor:
        provider = settings.vision_provider.lower()
        return VisionExtractor(
            client=cls._create_client(provider, settings),
            renderer=renderer,
            model=cls._resolve_model_name(provider, settings),
            temperature=settings.vision_openai_temperature,
            max_tokens=settings.vision_openai_max_tokens,
        )

    @classmethod
    def _create_client(cls, provider: str, settings: Settings) -> BaseVisionClient:
        if provider == "example":
            return ExampleVisionAdapter()
        if provider == "openai":
            return OpenAIVisionAdapter(
                api_key=settings.vision_openai_api_key,
                timeout_seconds=settings.vision_openai_timeout_seconds,
            )
        if provider == "openai_compatible":
            url = settings.vision_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "vision_openai_compatible_base_url is required for "
                    "vision_provider=openai_compatible"
                )
            return OpenAIVisionAdapter(
                api_key=settings.vision_openai_compatible_api_key,
                timeout_seconds=settings.vision_openai_timeout_seconds,
                base_url=url,
            )
        raise ValueError(
            f"Unknown vision provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        if provider == "example":
            return "example"
        if provider == "openai_compatible":
            return settings.vision_openai_compatible_model_name or settings.vision_openai_model_name
        return settings.vision_openai_model_name
