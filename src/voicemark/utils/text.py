"""
Low-level string helpers shared by the scanners and the compilers.
Offsets are always indices into the caller's original string.
"""
import re
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)

SENTENCE_TERMINATORS = ".!?"
BLOCK_WHITESPACE = " \t\n"

# Recognizers tend to glue these onto words around a spoken trigger ("Voice Mark, comma")
LENIENT_BOUNDARY_CHARS = ",;:.!?-"
POST_TRIGGER_PUNCTUATION = ",;:.-"

# [BLANK_AUDIO], [MUSIC], [ Silence ], ...
RECOGNIZER_ARTIFACT_PATTERN = re.compile(r"\[\s*[\w_]+\s*\]", re.IGNORECASE)
LEADING_PUNCTUATION_PATTERN = re.compile(r"^[.?!,;:\s]+")
TRAILING_PUNCTUATION_PATTERN = re.compile(r"[.?!,;:]+\s*$")


def is_word_boundary(char: Optional[str], lenient: bool = False) -> bool:
    """
    True if `char` may sit next to a whole word.
    None stands for the start or end of the string.
    """
    if char is None:
        return True
    if char.isspace():
        return True
    return lenient and char in LENIENT_BOUNDARY_CHARS


def char_at(text: str, index: int) -> Optional[str]:
    if 0 <= index < len(text):
        return text[index]
    return None


def skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def skip_post_trigger_punctuation(text: str, pos: int) -> int:
    """Skips runs like ", " or ": " that a recognizer put after a trigger phrase."""
    pos = skip_whitespace(text, pos)
    while pos < len(text) and text[pos] in POST_TRIGGER_PUNCTUATION:
        pos = skip_whitespace(text, pos + 1)
    return pos


def collapse_whitespace(text: str) -> str:
    """Lowercases, trims and collapses internal whitespace to single spaces."""
    return " ".join(text.lower().split())


def strip_recognizer_artifacts(text: str) -> str:
    cleaned = RECOGNIZER_ARTIFACT_PATTERN.sub("", text).strip()
    if cleaned != text.strip():
        logger.debug(f"Stripped recognizer artifacts from '{text[:50]}'")
    return cleaned


def strip_leading_punctuation(text: str) -> str:
    return LEADING_PUNCTUATION_PATTERN.sub("", text)


def strip_trailing_punctuation(text: str) -> str:
    return TRAILING_PUNCTUATION_PATTERN.sub("", text)


def is_terminator(chunk: str) -> bool:
    return len(chunk) == 1 and chunk in SENTENCE_TERMINATORS
