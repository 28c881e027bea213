from .errors import (
    StoryGenerationError,
    StoryServiceNotConfiguredError,
)
from .local_story_generator import LocalStoryGenerator
from .story_model import StoryParameters, StoryResult
from .story_prompts import StoryPrompt, build_story_prompt
from .story_text import clean_story_text
from .story_generator import GeminiStoryGenerator

__all__ = [
    "GeminiStoryGenerator",
    "LocalStoryGenerator",
    "StoryGenerationError",
    "StoryParameters",
    "StoryPrompt",
    "StoryResult",
    "StoryServiceNotConfiguredError",
    "build_story_prompt",
    "clean_story_text",
]
