class VisionError(Exception):
    """Base exception for vision extraction failures.

    ``user_message`` is the fixed text surfaced to end users; the exception
    string keeps the provider detail for logs.
    """

    user_message = "Document analysis failed. Please try again or contact support."

    def __init__(self, message: str = "", user_message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class VisionNotConfiguredError(VisionError):
    user_message = "OpenAI API key not configured"


class VisionAuthError(VisionError):
    user_message = (
        "Document analysis service is not configured correctly. "
        "Please contact your administrator."
    )


class VisionRateLimitError(VisionError):
    user_message = "Document analysis rate limit exceeded. Please try again in a few minutes."


class VisionTimeoutError(VisionError):
    user_message = "Document analysis timed out. The file may be too large or complex."


class VisionConnectionError(VisionError):
    user_message = (
        "Unable to connect to document analysis service. "
        "Please check your internet connection."
    )


class VisionBadRequestError(VisionError):
    user_message = "Invalid document format or content. Please try a different file."


class VisionServerError(VisionError):
    user_message = "Document analysis service is temporarily unavailable. Please try again later."


class VisionEmptyResponseError(VisionError):
    user_message = "No response from OpenAI"
