GENERIC_FAILURE_MESSAGE = (
    "Sorry, there was an error generating your story. Please try again."
)


class BedTaleError(Exception):
    """Base class for story generation errors."""


class StoryServiceNotConfiguredError(BedTaleError):
    def __init__(self, message: str = "GEMINI_API_KEY environment variable not set."):
        super().__init__(message)


class StoryGenerationError(BedTaleError):
    """Terminal failure surfaced to callers. The message is safe to show users."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


class UpstreamError(BedTaleError):
    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


class RetryableUpstreamError(UpstreamError):
    """Transient capacity failure (overloaded / rate exceeded)."""


class TerminalUpstreamError(UpstreamError):
    """Auth failures, malformed requests, empty responses and anything unknown."""
