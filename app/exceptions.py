class StudioError(Exception):
    """Base class for every error raised by the generation core."""


class ImageValidationError(StudioError, ValueError):
    """Raised when an input image is missing or not an image, before any API call."""


class NonRetriableError(StudioError):
    """Marker for failures that retrying cannot fix."""


class ContentBlockedError(NonRetriableError):
    """The model refused the request (safety or policy block)."""

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason


class EmptyImageResponseError(StudioError):
    """The API answered but returned no inline image."""


class RetryExhaustedError(StudioError):
    """All attempts failed with retriable errors."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class GenerationError(StudioError):
    """A whole logical request (angles or composites) failed."""
