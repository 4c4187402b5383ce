class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class ExtractionFailedError(ProcessorError):
    """Raised when extraction produced a result-level error.

    The message is already user-facing and becomes the job's error.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.user_message = message
