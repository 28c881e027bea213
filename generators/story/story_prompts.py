from dataclasses import dataclass
from typing import Sequence

from .story_model import StoryParameters

GENERIC_CHARACTERS_TEXT = "with friendly animal characters"

STORY_PROMPT_TEMPLATE = """Create a gentle, age-appropriate bedtime story for a baby named {child_name} (age: {child_age}).

Story requirements:
- Theme: {theme}
- Setting: {setting}
- Main characters: {characters_text}
- Emotional tone: {feeling}
- Life lesson: {lesson}
- Length: 6-8 short paragraphs suitable for babies and toddlers
- Language: simple, soothing, and repetitive words
- Style: warm, comforting, and full of wonder

The story should:
1. Be soothing and perfect for bedtime
2. Use simple vocabulary appropriate for the baby's age
3. Mention the baby by name throughout the story
4. Carry a positive, uplifting message about the life lesson above
5. Create a sense of wonder and safety
6. End with a peaceful, sleepy conclusion

IMPORTANT: Write the story as flowing paragraphs of text only. Do NOT include any image placeholders, image descriptions, bracketed markers, or visual references. Focus purely on the narrative text that will be read aloud."""


def join_characters(characters: Sequence[str]) -> str:
    names = [name for name in characters if name]
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def describe_characters(characters: Sequence[str]) -> str:
    joined = join_characters(characters)
    if not joined:
        return GENERIC_CHARACTERS_TEXT
    if len(characters) == 1:
        return f"featuring {joined} as the main character"
    return f"featuring {joined} as main characters"


@dataclass(frozen=True)
class StoryPrompt:
    template: str = STORY_PROMPT_TEMPLATE

    def generate_user_prompt(self, parameters: StoryParameters) -> str:
        try:
            return self.template.format(
                child_name=parameters.child_name,
                child_age=parameters.child_age,
                theme=parameters.theme,
                setting=parameters.setting,
                characters_text=describe_characters(parameters.characters),
                feeling=parameters.feeling,
                lesson=parameters.lesson,
            )
        except KeyError as exc:
            raise ValueError(
                f"Story prompt template has an unknown placeholder: {exc.args[0]}"
            ) from exc


def build_story_prompt(parameters: StoryParameters) -> str:
    return StoryPrompt().generate_user_prompt(parameters)
