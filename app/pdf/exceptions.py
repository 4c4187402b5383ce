RENDER_FAILED_MESSAGE = (
    "Failed to process PDF. The file may be corrupted or in an unsupported format."
)


class PdfRenderError(Exception):
    """Raised when a PDF cannot be rasterized.

    ``user_message`` is safe to show to end users; ``str(exc)`` carries the
    technical cause for logs.
    """

    def __init__(self, message: str, user_message: str = RENDER_FAILED_MESSAGE) -> None:
        super().__init__(message)
        self.user_message = user_message
