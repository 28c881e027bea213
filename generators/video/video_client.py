import time
from typing import Callable

from google import genai
from google.genai import types


class VideoGenerationError(Exception):
    pass


def build_video_prompt(description: str, subject_name: str, duration_sec: int) -> str:
    return f"""Generate a gentle, baby-friendly animated video: {description.strip()}

Video details:
- Duration: {duration_sec} seconds
- Style: soft watercolor animation, bright cheerful colors
- Movement: slow, gentle, soothing motions
- Content: safe for babies and toddlers, no scary elements
- Characters: cute, friendly animals and {subject_name}
- Mood: warm, comforting, and joyful

Include gentle movements like floating butterflies, swaying flowers, or characters waving hello."""


class VideoGenerationClient:
    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = "veo-2.0-generate-001",
        poll_interval_sec: float = 10.0,
        max_wait_sec: float = 300.0,
        client: genai.Client | None = None,
        sleep_fn: Callable[[float], None] = time.sleep,
        monotonic_fn: Callable[[], float] = time.monotonic,
    ):
        if client is None and not api_key:
            raise ValueError("GEMINI_VIDEO_API_KEY environment variable not set.")
        if poll_interval_sec <= 0:
            raise ValueError("poll_interval_sec must be greater than 0.")

        self.client = client or genai.Client(api_key=api_key)
        self.model_name = model_name
        self.poll_interval_sec = poll_interval_sec
        self.max_wait_sec = max_wait_sec
        self._sleep_fn = sleep_fn
        self._monotonic_fn = monotonic_fn

    def _build_config(self, duration_sec: int) -> types.GenerateVideosConfig:
        return types.GenerateVideosConfig(
            number_of_videos=1,
            duration_seconds=duration_sec,
        )

    def generate_video(self, description: str, subject_name: str, duration_sec: int = 6) -> str:
        """Starts a video generation operation and polls it until a video URI is available."""
        prompt = build_video_prompt(description, subject_name, duration_sec)
        started = self._monotonic_fn()

        operation = self.client.models.generate_videos(
            model=self.model_name,
            prompt=prompt,
            config=self._build_config(duration_sec),
        )
        while not operation.done:
            if self._monotonic_fn() - started >= self.max_wait_sec:
                raise VideoGenerationError(
                    f"video generation did not finish within {self.max_wait_sec:.0f}s"
                )
            self._sleep_fn(self.poll_interval_sec)
            operation = self.client.operations.get(operation)

        error = getattr(operation, "error", None)
        if error:
            raise VideoGenerationError(f"video generation failed: {error}")

        response = getattr(operation, "response", None)
        generated_videos = getattr(response, "generated_videos", None) or []
        for generated in generated_videos:
            video = getattr(generated, "video", None)
            uri = getattr(video, "uri", None)
            if uri:
                return uri

        raise VideoGenerationError("No video returned from video model.")
