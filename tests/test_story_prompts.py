import unittest

from generators.story.story_model import StoryParameters
from generators.story.story_prompts import (
    GENERIC_CHARACTERS_TEXT,
    StoryPrompt,
    build_story_prompt,
    join_characters,
)
from generators.story.story_text import SQUARE_MARKER_PATTERN


def _params(**overrides) -> StoryParameters:
    values = {
        "child_name": "Mia",
        "child_age": "1-2 years",
        "characters": ("Bunny", "Owl"),
        "feeling": "curious",
        "theme": "nature",
        "setting": "ocean",
        "lesson": "patience",
    }
    values.update(overrides)
    return StoryParameters(**values)


class TestStoryPrompt(unittest.TestCase):
    def test_embeds_every_field_exactly_once(self):
        prompt = build_story_prompt(_params())

        for value in ("Mia", "1-2 years", "nature", "ocean", "curious", "patience"):
            with self.subTest(value=value):
                self.assertEqual(prompt.count(value), 1)
        self.assertIn("featuring Bunny and Owl as main characters", prompt)

    def test_every_vocabulary_combination_keeps_fields_unique(self):
        for feeling in ("happy", "excited", "calm", "curious", "brave", "kind"):
            for setting in ("forest", "ocean", "garden", "castle", "farm", "space", "home"):
                prompt = build_story_prompt(
                    _params(feeling=feeling, setting=setting, theme="magic", lesson="honesty")
                )
                with self.subTest(feeling=feeling, setting=setting):
                    self.assertEqual(prompt.count(feeling), 1)
                    self.assertEqual(prompt.count(setting), 1)
                    self.assertEqual(prompt.count("magic"), 1)
                    self.assertEqual(prompt.count("honesty"), 1)

    def test_prompt_is_deterministic(self):
        self.assertEqual(build_story_prompt(_params()), build_story_prompt(_params()))

    def test_empty_character_list_uses_generic_phrase(self):
        prompt = build_story_prompt(_params(characters=()))

        self.assertIn(GENERIC_CHARACTERS_TEXT, prompt)
        self.assertNotIn("featuring", prompt)

    def test_single_character_phrase(self):
        prompt = build_story_prompt(_params(characters=("Bear",)))
        self.assertIn("featuring Bear as the main character", prompt)

    def test_prompt_forbids_and_contains_no_markers(self):
        prompt = build_story_prompt(_params())

        self.assertIn("Do NOT include any image placeholders", prompt)
        self.assertIsNone(SQUARE_MARKER_PATTERN.search(prompt))

    def test_join_characters(self):
        self.assertEqual(join_characters([]), "")
        self.assertEqual(join_characters(["Cat"]), "Cat")
        self.assertEqual(join_characters(["Cat", "Dog"]), "Cat and Dog")
        self.assertEqual(join_characters(["Cat", "Dog", "Fox"]), "Cat, Dog and Fox")

    def test_unknown_template_placeholder_raises_value_error(self):
        prompt = StoryPrompt(template="Name: {child_name}, Bad: {unknown_key}")

        with self.assertRaises(ValueError) as context:
            prompt.generate_user_prompt(_params())

        self.assertIn("unknown placeholder", str(context.exception))


if __name__ == "__main__":
    unittest.main()
