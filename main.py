import argparse
import dataclasses
import datetime
import logging
import sys

from pydantic import ValidationError

from app.core.config import get_settings
from app.services.storage import build_download_filename
from app.services.story_service import StoryService
from generators.story.errors import (
    GENERIC_FAILURE_MESSAGE,
    StoryGenerationError,
    StoryServiceNotConfiguredError,
)
from generators.story.story_model import (
    AGE_OPTIONS,
    CHARACTER_OPTIONS,
    FEELING_OPTIONS,
    LESSON_OPTIONS,
    MAX_CHARACTERS,
    SETTING_OPTIONS,
    THEME_OPTIONS,
    StoryParameters,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a personalized bedtime story.")
    parser.add_argument("--child_name", required=True, help="Name of the child")
    parser.add_argument("--child_age", default="6-12 months", choices=AGE_OPTIONS, help="Age bracket")
    parser.add_argument(
        "--characters",
        nargs="+",
        required=True,
        choices=CHARACTER_OPTIONS,
        help=f"Story characters (choose 1 to {MAX_CHARACTERS})",
    )
    parser.add_argument("--feeling", default="happy", choices=FEELING_OPTIONS)
    parser.add_argument("--theme", default="adventure", choices=THEME_OPTIONS)
    parser.add_argument("--setting", default="forest", choices=SETTING_OPTIONS)
    parser.add_argument("--lesson", default="friendship", choices=LESSON_OPTIONS)
    parser.add_argument(
        "--generator",
        default="gemini",
        choices=["gemini", "local"],
        help="Story source: the Gemini API or the offline template generator.",
    )
    parser.add_argument(
        "--wait_video",
        type=float,
        default=0.0,
        help="Seconds to wait for the speculative video after the story is printed (0 = don't wait).",
    )
    parser.add_argument(
        "--output",
        default="",
        help="Write the story text to this file. Use '-' for the default '<name>-story-<date>.txt'.",
    )
    parser.add_argument("--verbose", action="store_true", help="Show retry and video logs.")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    unique_characters = list(dict.fromkeys(args.characters))
    if len(unique_characters) > MAX_CHARACTERS:
        parser.error(f"choose at most {MAX_CHARACTERS} characters")

    try:
        parameters = StoryParameters(
            child_name=args.child_name,
            child_age=args.child_age,
            characters=unique_characters,
            feeling=args.feeling,
            theme=args.theme,
            setting=args.setting,
            lesson=args.lesson,
        )
    except ValidationError as error:
        parser.error(str(error))

    settings = get_settings()
    if args.wait_video <= 0:
        # Video is only requested when the caller waits for it.
        settings = dataclasses.replace(settings, video_enabled=False)
    story_service = StoryService.from_settings(settings)
    try:
        if not story_service.is_configured(args.generator):
            raise StoryServiceNotConfiguredError()

        print("Generating bedtime story...")
        result = story_service.generate_story(parameters, source=args.generator)
        print()
        print(result.text)
        print()

        if args.output:
            output_path = args.output
            if output_path == "-":
                output_path = build_download_filename(parameters.child_name, datetime.datetime.now())
            with open(output_path, "w", encoding="utf-8") as file:
                file.write(result.text)
            print(f"Story saved to: {output_path}")

        if result.has_video:
            print(f"Waiting up to {args.wait_video:.0f}s for the story video...")
            poll = result.video.wait(timeout=args.wait_video)
            if poll.status == "ready":
                print(f"Video ready: {poll.url}")
            else:
                print(f"Video not available (status={poll.status}).")
    except StoryServiceNotConfiguredError:
        print("GEMINI_API_KEY environment variable not set. Use --generator local to write a story offline.")
        sys.exit(1)
    except StoryGenerationError:
        print(GENERIC_FAILURE_MESSAGE)
        sys.exit(1)
    finally:
        story_service.shutdown()


if __name__ == "__main__":
    main()
