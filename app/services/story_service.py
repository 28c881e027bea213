from __future__ import annotations

from generators.story.local_story_generator import LocalStoryGenerator
from generators.story.story_generator import GeminiStoryGenerator
from generators.story.story_model import StoryParameters, StoryResult, StorySource
from generators.video.video_client import VideoGenerationClient
from generators.video.video_requester import SpeculativeVideoRequester

from app.core.config import Settings


class StoryService:
    """Picks the story source for a request. Built once per application."""

    def __init__(
        self,
        gemini_generator: GeminiStoryGenerator,
        local_generator: LocalStoryGenerator,
        video_requester: SpeculativeVideoRequester,
    ) -> None:
        self.gemini_generator = gemini_generator
        self.local_generator = local_generator
        self.video_requester = video_requester

    @classmethod
    def from_settings(cls, settings: Settings) -> "StoryService":
        video_client = None
        if settings.video_configured:
            video_client = VideoGenerationClient(
                api_key=settings.video_api_key,
                model_name=settings.video_model,
                poll_interval_sec=settings.video_poll_interval_sec,
                max_wait_sec=settings.video_max_wait_sec,
            )
        video_requester = SpeculativeVideoRequester(
            video_client=video_client,
            duration_sec=settings.video_duration_sec,
            max_workers=settings.video_workers,
        )
        gemini_generator = GeminiStoryGenerator(
            api_key=settings.gemini_api_key or None,
            model_name=settings.story_model,
            max_attempts=settings.max_attempts,
            backoff_base_sec=settings.backoff_base_sec,
            video_requester=video_requester,
        )
        return cls(
            gemini_generator=gemini_generator,
            local_generator=LocalStoryGenerator(),
            video_requester=video_requester,
        )

    def _generator_for(self, source: StorySource):
        if source == "local":
            return self.local_generator
        return self.gemini_generator

    def is_configured(self, source: StorySource = "gemini") -> bool:
        return self._generator_for(source).is_configured()

    def video_available(self) -> bool:
        return self.video_requester.is_available()

    def generate_story(self, parameters: StoryParameters, source: StorySource = "gemini") -> StoryResult:
        return self._generator_for(source).generate_story(parameters)

    def shutdown(self) -> None:
        self.video_requester.shutdown(wait=False)
