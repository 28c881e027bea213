from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from generators.story.story_model import (
    MAX_CHARACTERS,
    AgeBracket,
    CharacterTag,
    Feeling,
    Lesson,
    Setting,
    StoryParameters,
    StorySource,
    Theme,
)
from generators.video.video_task import VideoStatus


class StoryCreateRequest(BaseModel):
    child_name: str = Field(..., min_length=1)
    child_age: AgeBracket = "6-12 months"
    characters: List[CharacterTag] = Field(..., min_length=1, max_length=MAX_CHARACTERS)
    feeling: Feeling = "happy"
    theme: Theme = "adventure"
    setting: Setting = "forest"
    lesson: Lesson = "friendship"
    generator: StorySource = "gemini"

    @field_validator("child_name")
    @classmethod
    def validate_child_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("child_name must not be empty")
        return normalized

    def to_parameters(self) -> StoryParameters:
        return StoryParameters(
            child_name=self.child_name,
            child_age=self.child_age,
            characters=tuple(self.characters),
            feeling=self.feeling,
            theme=self.theme,
            setting=self.setting,
            lesson=self.lesson,
        )


class StoryError(BaseModel):
    code: str
    message: str
    detail: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    error: StoryError


class CapabilitiesResponse(BaseModel):
    story_service_configured: bool
    video_available: bool


class VideoStatusResponse(BaseModel):
    id: str
    status: VideoStatus
    video_url: str | None = None


class StoryResponse(BaseModel):
    id: str
    source: StorySource
    child_name: str
    text: str
    paragraphs: list[str]
    has_video: bool
    video_status: VideoStatus
    video_url: str | None = None
    created_at: str
    video_status_url: str
    download_url: str
