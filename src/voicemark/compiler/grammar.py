"""
The VoiceMark command grammar.

A command is a trigger phrase ("voicemark", "voice mark") followed by a
command phrase. `voice_command_to_editor_op` classifies a single command
string; the inline and mixed compilers use SUPPORTED_COMMANDS to find where
a command phrase ends inside longer dictation.
"""
import re
from typing import Dict, List, Optional

import structlog

from voicemark.models import (
    CommandParse,
    Confidence,
    ConfirmParse,
    DeleteLastSentence,
    DeleteLastWord,
    Format,
    FormatAction,
    FormatStyle,
    InsertNewLine,
    InsertNewParagraph,
    InsertParse,
    InsertText,
    OpsParse,
    ParseContext,
)
from voicemark.utils.text import collapse_whitespace

logger = structlog.get_logger(__name__)

DELETE_LAST_SENTENCE_PROMPT = "Delete the last sentence?"

FORMAT_PATTERN = re.compile(r"^(make|unmake|toggle) (bold|italic|italics|underline|underlined)$")

STYLE_ALIASES = {
    "italics": "italic",
    "underlined": "underline",
}

PUNCTUATION_COMMANDS = {
    "comma": ",",
    "full stop": ".",
    "question mark": "?",
    "exclamation mark": "!",
    "colon": ":",
    "semicolon": ";",
    "dash": "-",
}

LAYOUT_COMMANDS = {
    "new line": InsertNewLine(),
    "new paragraph": InsertNewParagraph(),
}

DELETE_LAST_WORD = "delete last word"
DELETE_LAST_SENTENCE = "delete last sentence"

PERIOD_ALIAS = "period"
PERIOD_ALIAS_PATTERN = re.compile(r"\bperiod\b")

# Spellings a recognizer commonly produces for command words
MISHEARD_COMMANDS: Dict[str, str] = {
    "escalimation mark": "exclamation mark",
    "esclamation mark": "exclamation mark",
    "esklimation mark": "exclamation mark",
    "esklamation mark": "exclamation mark",
    "excalmation mark": "exclamation mark",
    "exclaimation mark": "exclamation mark",
    "explanation mark": "exclamation mark",
    "exclimation mark": "exclamation mark",
    "exclemation mark": "exclamation mark",
    "questioning mark": "question mark",
    "fullstop": "full stop",
    "full-stop": "full stop",
    "new paragraf": "new paragraph",
    "new paragragh": "new paragraph",
    "coma": "comma",
}


def _supported_commands() -> List[str]:
    phrases = list(PUNCTUATION_COMMANDS)
    # Scanned in every locale; only en-US turns it into a full stop
    phrases.append(PERIOD_ALIAS)
    phrases.extend(LAYOUT_COMMANDS)
    phrases.extend([DELETE_LAST_WORD, DELETE_LAST_SENTENCE])
    for action in ("make", "unmake", "toggle"):
        for style in ("bold", "italic", "italics", "underline", "underlined"):
            phrases.append(f"{action} {style}")
    return phrases


SUPPORTED_COMMANDS: List[str] = _supported_commands()


def voice_command_to_editor_op(text: str, context: Optional[ParseContext] = None) -> CommandParse:
    """
    Parses one spoken command into editor operations.

    Text that does not start with a trigger phrase comes back unchanged as
    an InsertParse. A trigger with an unknown phrase yields empty ops with
    MEDIUM confidence: the words are dropped rather than typed.
    """
    context = context or ParseContext()

    normalized = collapse_whitespace(text)
    if context.uses_period_alias:
        normalized = PERIOD_ALIAS_PATTERN.sub("full stop", normalized)

    command = _strip_prefix(normalized, context.prefixes)
    if command is None:
        return InsertParse(text=text)

    if not command:
        return OpsParse(ops=[], confidence=Confidence.HIGH)

    return parse_command(command)


def _strip_prefix(normalized: str, prefixes: List[str]) -> Optional[str]:
    for prefix in prefixes:
        prefix = collapse_whitespace(prefix)
        if normalized == prefix:
            return ""
        if normalized.startswith(prefix + " "):
            return normalized[len(prefix) + 1 :]
    return None


def parse_command(command: str) -> CommandParse:
    """Parses a normalized command phrase (the words after the trigger)."""
    format_match = FORMAT_PATTERN.match(command)
    if format_match:
        action, style = format_match.groups()
        style = STYLE_ALIASES.get(style, style)
        return OpsParse(
            ops=[Format(style=FormatStyle(style), action=FormatAction(action))],
            confidence=Confidence.HIGH,
        )

    if command == DELETE_LAST_WORD:
        return OpsParse(ops=[DeleteLastWord()], confidence=Confidence.HIGH)

    if command == DELETE_LAST_SENTENCE:
        return ConfirmParse(ops=[DeleteLastSentence()], prompt=DELETE_LAST_SENTENCE_PROMPT)

    if command in PUNCTUATION_COMMANDS:
        return OpsParse(ops=[InsertText(text=PUNCTUATION_COMMANDS[command])], confidence=Confidence.HIGH)

    if command in LAYOUT_COMMANDS:
        return OpsParse(ops=[LAYOUT_COMMANDS[command]], confidence=Confidence.HIGH)

    logger.debug(f"Unrecognized command '{command}' dropped")
    return OpsParse(ops=[], confidence=Confidence.MEDIUM)
