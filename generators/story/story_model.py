from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

from generators.video.video_task import VideoTask

AgeBracket = Literal[
    "0-6 months",
    "6-12 months",
    "1-2 years",
    "2-3 years",
    "3-4 years",
    "4-5 years",
]
CharacterTag = Literal[
    "Bunny",
    "Bear",
    "Cat",
    "Dog",
    "Elephant",
    "Lion",
    "Monkey",
    "Owl",
    "Fox",
    "Penguin",
]
Feeling = Literal["happy", "excited", "calm", "curious", "brave", "kind"]
Theme = Literal["adventure", "friendship", "learning", "magic", "nature", "family"]
Setting = Literal["forest", "ocean", "garden", "castle", "farm", "space", "home"]
Lesson = Literal["friendship", "sharing", "kindness", "courage", "honesty", "patience"]
StorySource = Literal["gemini", "local"]

AGE_OPTIONS: tuple[str, ...] = get_args(AgeBracket)
CHARACTER_OPTIONS: tuple[str, ...] = get_args(CharacterTag)
FEELING_OPTIONS: tuple[str, ...] = get_args(Feeling)
THEME_OPTIONS: tuple[str, ...] = get_args(Theme)
SETTING_OPTIONS: tuple[str, ...] = get_args(Setting)
LESSON_OPTIONS: tuple[str, ...] = get_args(Lesson)

MAX_CHARACTERS = 3


class StoryParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    child_name: str = Field(..., min_length=1, description="Name of the child the story is for")
    child_age: AgeBracket = Field(default="6-12 months")
    characters: Tuple[CharacterTag, ...] = Field(
        default=(),
        description="Up to three character tags, in the order they were chosen",
    )
    feeling: Feeling = Field(default="happy")
    theme: Theme = Field(default="adventure")
    setting: Setting = Field(default="forest")
    lesson: Lesson = Field(default="friendship")

    @field_validator("child_name")
    @classmethod
    def validate_child_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("child_name must not be empty")
        return normalized

    @field_validator("characters")
    @classmethod
    def dedupe_characters(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        unique = tuple(dict.fromkeys(value))
        if len(unique) > MAX_CHARACTERS:
            raise ValueError(f"at most {MAX_CHARACTERS} characters can be chosen, got {len(unique)}")
        return unique


@dataclass(frozen=True)
class StoryResult:
    text: str
    has_video: bool = False
    video: VideoTask = field(default_factory=VideoTask.not_requested)
    source: StorySource = "gemini"

    @property
    def video_url(self) -> Optional[str]:
        return self.video.url
