import logging
import time
from typing import Callable, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from generators.retry import retry_with_backoff
from generators.video.video_requester import SpeculativeVideoRequester

from .errors import (
    RetryableUpstreamError,
    StoryGenerationError,
    StoryServiceNotConfiguredError,
    TerminalUpstreamError,
)
from .story_model import StoryParameters, StoryResult
from .story_prompts import StoryPrompt
from .story_text import clean_story_text

logger = logging.getLogger("bedtale.generators.story")

OVERLOAD_STATUS_CODES = {503}
RATE_LIMIT_STATUS_CODES = {429}
OVERLOAD_MESSAGE_MARKERS = ("overloaded", "unavailable")
RATE_LIMIT_MESSAGE_MARKERS = ("resource_exhausted", "resource exhausted", "rate limit", "quota")


def is_overload_error(error: Exception) -> bool:
    """
    True for the transient capacity signature: a 503 that reports the model as
    overloaded/unavailable, or a 429 that reports exhausted quota or rate.
    """
    if isinstance(error, RetryableUpstreamError):
        return True
    if not isinstance(error, genai_errors.APIError):
        return False

    code = getattr(error, "code", None)
    message = " ".join(
        str(part)
        for part in (getattr(error, "status", None), getattr(error, "message", None), error)
        if part
    ).lower()
    if code in OVERLOAD_STATUS_CODES:
        return any(marker in message for marker in OVERLOAD_MESSAGE_MARKERS)
    if code in RATE_LIMIT_STATUS_CODES:
        return any(marker in message for marker in RATE_LIMIT_MESSAGE_MARKERS)
    return False


def _response_text(response) -> str:
    try:
        text = getattr(response, "text", None)
    except ValueError:
        text = None
    return text if isinstance(text, str) else ""


class GeminiStoryGenerator:
    source = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-2.5-flash",
        max_attempts: int = 3,
        backoff_base_sec: float = 1.0,
        temperature: float = 1.0,
        video_requester: Optional[SpeculativeVideoRequester] = None,
        client: Optional[genai.Client] = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

        self.client = client
        if self.client is None and api_key:
            self.client = genai.Client(api_key=api_key)
        if self.client is None:
            logger.warning("Gemini API key not found. Story generation is not available.")
        self.model_name = model_name
        self.max_attempts = max_attempts
        self.backoff_base_sec = backoff_base_sec
        self.temperature = temperature
        self.video_requester = video_requester or SpeculativeVideoRequester()
        self.prompts = StoryPrompt()
        self._sleep_fn = sleep_fn

    def is_configured(self) -> bool:
        return self.client is not None

    def _generate_text_once(self, prompt: str) -> str:
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=types.GenerateContentConfig(temperature=self.temperature),
            )
        except genai_errors.APIError as error:
            if is_overload_error(error):
                raise RetryableUpstreamError(str(error), code=error.code) from error
            raise TerminalUpstreamError(str(error), code=error.code) from error

        text = _response_text(response)
        if not text.strip():
            raise TerminalUpstreamError("No story text returned from text model.")
        return text

    def generate_text(self, prompt: str) -> str:
        """Returns the raw text of the first successful attempt."""
        return retry_with_backoff(
            lambda: self._generate_text_once(prompt),
            is_retryable=is_overload_error,
            attempts=self.max_attempts,
            base_delay_sec=self.backoff_base_sec,
            context=f"model={self.model_name}",
            sleep_fn=self._sleep_fn,
        )

    def generate_story(self, parameters: StoryParameters) -> StoryResult:
        """
        Generates a bedtime story with the Gemini API.

        Raises StoryServiceNotConfiguredError without touching the network when
        no API key is configured, and StoryGenerationError for every terminal
        upstream failure. A video request is started after the text is cleaned;
        the story is returned without waiting for it.
        """
        if not self.is_configured():
            raise StoryServiceNotConfiguredError()

        prompt = self.prompts.generate_user_prompt(parameters)
        try:
            raw_text = self.generate_text(prompt)
        except Exception as error:
            logger.error("Error generating story: model=%s error=%s", self.model_name, error)
            raise StoryGenerationError() from error

        text = clean_story_text(raw_text)
        if not text:
            logger.error("Error generating story: model=%s error=empty after cleanup", self.model_name)
            raise StoryGenerationError()

        video = self.video_requester.request(text, parameters.child_name)
        return StoryResult(
            text=text,
            has_video=video.requested,
            video=video,
            source=self.source,
        )
