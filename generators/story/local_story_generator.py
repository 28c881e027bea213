import random
import re
from typing import Optional

from .story_model import MAX_CHARACTERS, StoryParameters, StoryResult

TEMPLATES: dict[str, list[str]] = {
    "adventure": [
        "Once upon a time, in a magical {setting}, there lived a little {character1} named {character1Name}.",
        "One {feeling} morning, {babyName} and {character1Name} decided to go on an adventure.",
        "They met {character2Name} the {character2} who was {character2Action}.",
        "Together, they discovered {discovery} and learned about {lesson}.",
        "With {character3Name} the {character3} joining them, they had the most wonderful time.",
        "At the end of their adventure, {babyName} felt so {feeling} and proud.",
        "They all became the best of friends and promised to have more adventures together.",
        "And {babyName} fell asleep with a big smile, dreaming of tomorrow's fun.",
    ],
    "friendship": [
        "In a cozy {setting}, {babyName} met a sweet {character1} named {character1Name}.",
        "At first, {babyName} was a little shy, but {character1Name} was so {feeling} and welcoming.",
        "{character1Name} showed {babyName} how to {friendlyAction}.",
        "Soon, {character2Name} the {character2} came to play too.",
        "They all learned that {lesson} makes friendships even stronger.",
        "When {character3Name} the {character3} felt sad, they all worked together to help.",
        "{babyName} discovered that having friends makes everything more {feeling}.",
        "That night, {babyName} hugged their new friends and felt so loved.",
    ],
    "learning": [
        "{babyName} was a very {feeling} little one who loved to explore.",
        "In the beautiful {setting}, there was so much to discover!",
        "{character1Name} the {character1} taught {babyName} about {learningTopic}.",
        "Then {character2Name} the {character2} showed them {skill}.",
        "{character3Name} the {character3} helped {babyName} practice {lesson}.",
        "Every day brought new things to learn and explore.",
        "{babyName} grew more {feeling} with each new experience.",
        "At bedtime, {babyName} was proud of all they had learned that day.",
    ],
}
DEFAULT_THEME = "adventure"

CHARACTER_ACTIONS: dict[str, list[str]] = {
    "adventure": [
        "playing in the sunshine",
        "collecting colorful flowers",
        "singing beautiful songs",
        "building sandcastles",
        "chasing butterflies",
    ],
    "friendship": ["share toys", "sing together", "dance", "paint pictures", "read books"],
    "learning": [
        "colors and shapes",
        "numbers and letters",
        "animal sounds",
        "how to be kind",
        "sharing and caring",
    ],
}

DISCOVERIES: dict[str, list[str]] = {
    "forest": ["a hidden waterfall", "a family of friendly deer", "rainbow-colored mushrooms", "singing birds"],
    "ocean": ["sparkling seashells", "dancing dolphins", "a magical coral garden", "gentle sea turtles"],
    "garden": ["buzzing bees making honey", "butterflies dancing", "growing vegetables", "singing flowers"],
    "castle": ["a room full of books", "friendly dragons", "magical paintings", "treasure chests"],
    "farm": ["baby animals playing", "fresh strawberries", "a kind farmer", "golden wheat fields"],
    "space": ["twinkling stars", "friendly planets", "shooting stars", "moon rabbits"],
    "home": ["cozy reading nooks", "warm cookies", "family photos", "soft blankets"],
}

CHARACTER_NAMES: dict[str, list[str]] = {
    "Bunny": ["Fluffy", "Cotton", "Whiskers", "Snowy"],
    "Bear": ["Honey", "Teddy", "Cocoa", "Maple"],
    "Cat": ["Whiskers", "Luna", "Shadow", "Mittens"],
    "Dog": ["Buddy", "Sunny", "Chase", "Ruby"],
    "Elephant": ["Ella", "Peanut", "Dumbo", "Grace"],
    "Lion": ["Leo", "Sunny", "Royal", "Brave"],
    "Monkey": ["Mango", "Zippy", "Banana", "Swing"],
    "Owl": ["Hoot", "Wise", "Olive", "Luna"],
    "Fox": ["Rusty", "Clever", "Amber", "Swift"],
    "Penguin": ["Waddle", "Ice", "Splash", "Frost"],
}
FALLBACK_CHARACTER_NAMES = ["Friend"]
FILLER_CHARACTER_NAME = "Friend"
FILLER_CHARACTER_KIND = "little friend"
SKILL_TEXT = "how to be gentle and kind"

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")
SENTENCE_BOUNDARY_PATTERN = re.compile(r"(?<=[.!?])\s+")
SENTENCES_PER_PARAGRAPH = 2


def segment_paragraphs(text: str, sentences_per_paragraph: int = SENTENCES_PER_PARAGRAPH) -> str:
    sentences = [sentence for sentence in SENTENCE_BOUNDARY_PATTERN.split(text.strip()) if sentence]
    paragraphs = [
        " ".join(sentences[index : index + sentences_per_paragraph])
        for index in range(0, len(sentences), sentences_per_paragraph)
    ]
    return "\n\n".join(paragraphs)


class LocalStoryGenerator:
    """Offline template story generator. Needs no credentials and makes no network calls."""

    source = "local"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def is_configured(self) -> bool:
        return True

    def _pick(self, options: list[str]) -> str:
        return options[self.rng.randrange(len(options))]

    def _character_values(self, characters) -> dict[str, str]:
        values: dict[str, str] = {}
        for index in range(MAX_CHARACTERS):
            slot = index + 1
            if index < len(characters):
                tag = characters[index]
                values[f"character{slot}Name"] = self._pick(
                    CHARACTER_NAMES.get(tag, FALLBACK_CHARACTER_NAMES)
                )
                values[f"character{slot}"] = tag.lower()
            else:
                values[f"character{slot}Name"] = FILLER_CHARACTER_NAME
                values[f"character{slot}"] = FILLER_CHARACTER_KIND
        return values

    def _fill(self, sentence: str, values: dict[str, str], parameters: StoryParameters) -> str:
        def replace(match: re.Match) -> str:
            key = match.group(1)
            if key in values:
                return values[key]
            if key == "character2Action":
                return self._pick(CHARACTER_ACTIONS.get(parameters.theme, CHARACTER_ACTIONS["adventure"]))
            if key == "discovery":
                return self._pick(DISCOVERIES.get(parameters.setting, DISCOVERIES["forest"]))
            if key == "friendlyAction":
                return self._pick(CHARACTER_ACTIONS["friendship"])
            if key == "learningTopic":
                return self._pick(CHARACTER_ACTIONS["learning"])
            return match.group(0)

        return PLACEHOLDER_PATTERN.sub(replace, sentence)

    def generate_text(self, parameters: StoryParameters) -> str:
        template = TEMPLATES.get(parameters.theme, TEMPLATES[DEFAULT_THEME])
        values = {
            "babyName": parameters.child_name,
            "setting": parameters.setting,
            "feeling": parameters.feeling,
            "lesson": parameters.lesson,
            "theme": parameters.theme,
            "skill": SKILL_TEXT,
        }
        values.update(self._character_values(parameters.characters))

        story = " ".join(self._fill(sentence, values, parameters) for sentence in template)
        return segment_paragraphs(story)

    def generate_story(self, parameters: StoryParameters) -> StoryResult:
        return StoryResult(text=self.generate_text(parameters), has_video=False, source=self.source)
