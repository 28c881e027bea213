import re

MARKER_KEYWORDS = (
    "image",
    "images",
    "illustration",
    "picture",
    "photo",
    "drawing",
    "video",
    "animation",
    "scene",
    "visual",
)
_KEYWORDS = "|".join(MARKER_KEYWORDS)

# [IMAGE: ...] / [Scene 2: ...] / [IMAGE#4: ...], closed or running to the end of the line.
SQUARE_MARKER_PATTERN = re.compile(
    r"\[\s*[A-Za-z][A-Za-z0-9 #_-]{0,30}?\s*:[^\]\n]*\]?"
)
# (Image: ...) and (Image 3: ...) only for known keywords; parentheses are ordinary prose otherwise.
PAREN_MARKER_PATTERN = re.compile(
    rf"\(\s*(?:{_KEYWORDS})\s*#?\s*\d*\s*:[^)\n]*\)?",
    re.IGNORECASE,
)
BARE_MARKER_PATTERN = re.compile(
    rf"[\[(]\s*(?:{_KEYWORDS})\s*#?\s*\d*\s*[\])]",
    re.IGNORECASE,
)
PLACEHOLDER_PHRASE_PATTERN = re.compile(r"image placeholder", re.IGNORECASE)

HEADING_PATTERN = re.compile(r"^[ \t]*#{1,6}[ \t]*", re.MULTILINE)
EMPHASIS_PATTERN = re.compile(r"\*+|__+|`+")

LINE_EDGE_WHITESPACE_PATTERN = re.compile(r"[ \t]*\n[ \t]*")
EXCESS_LINE_BREAKS_PATTERN = re.compile(r"\n{3,}")
HORIZONTAL_WHITESPACE_PATTERN = re.compile(r"[^\S\n]+")


def remove_markers(text: str) -> str:
    text = SQUARE_MARKER_PATTERN.sub("", text)
    text = PAREN_MARKER_PATTERN.sub("", text)
    text = BARE_MARKER_PATTERN.sub("", text)
    return PLACEHOLDER_PHRASE_PATTERN.sub("", text)


def strip_markdown(text: str) -> str:
    text = HEADING_PATTERN.sub("", text)
    return EMPHASIS_PATTERN.sub("", text)


def collapse_line_breaks(text: str) -> str:
    text = LINE_EDGE_WHITESPACE_PATTERN.sub("\n", text)
    return EXCESS_LINE_BREAKS_PATTERN.sub("\n\n", text)


def collapse_horizontal_whitespace(text: str) -> str:
    return HORIZONTAL_WHITESPACE_PATTERN.sub(" ", text)


def _clean_once(text: str) -> str:
    text = remove_markers(text)
    text = strip_markdown(text)
    text = collapse_line_breaks(text)
    text = collapse_horizontal_whitespace(text)
    return text.strip()


def clean_story_text(raw: str) -> str:
    """
    Cleans generated story text for display and narration.

    Removing a marker or an emphasis run can join its neighbours into a new
    marker, so the steps are repeated until the text stops changing. This keeps
    clean_story_text(clean_story_text(x)) == clean_story_text(x).
    """
    text = (raw or "").replace("\r\n", "\n").replace("\r", "\n")
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
