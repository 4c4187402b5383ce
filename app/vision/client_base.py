from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific multimodal model clients."""

    @abstractmethod
    def create_vision_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        image_url: str,
    ) -> str:
        """Send one prompt plus one image and return the reply text.

        Raises:
            VisionError: a subclass naming the failure class.
        """

    @property
    def is_configured(self) -> bool:
        """False when the client cannot make any call (e.g. no API key)."""
        return True
