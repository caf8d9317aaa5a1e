"""
Locates trigger phrases and the command phrases that follow them.

Both scanners compare case-insensitively but report offsets and matched text
from the caller's original string, so the plain text between commands keeps
its casing and internal spacing.
"""
import re
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence

import structlog

from voicemark.compiler.grammar import MISHEARD_COMMANDS, SUPPORTED_COMMANDS
from voicemark.models import ParseContext
from voicemark.utils.text import char_at, is_word_boundary, skip_post_trigger_punctuation, skip_whitespace

logger = structlog.get_logger(__name__)

SEGMENT_TEXT = "text"
SEGMENT_COMMAND = "command"
SEGMENT_TRIGGER = "trigger"


class PrefixMatch(NamedTuple):
    start: int
    end: int
    # As it appears in the text (original casing)
    prefix: str


class PhraseMatch(NamedTuple):
    # Canonical grammar phrase, lowercase
    phrase: str
    end: int


class Segment(NamedTuple):
    """
    One piece of an utterance.

    text:    plain dictation; `text` is the raw source slice
    command: trigger followed by a supported phrase
    trigger: trigger with no supported phrase after it
    """

    kind: str
    text: str
    start: int
    end: int
    prefix: str = ""
    phrase: str = ""


def find_next_prefix(
    text: str,
    start: int,
    prefixes: Sequence[str],
    lenient: bool = False,
) -> Optional[PrefixMatch]:
    """
    Returns the earliest whole-word, case-insensitive occurrence of any prefix
    at or after `start`, or None.
    When two prefixes match at the same index the earlier prefix in
    `prefixes` wins.
    """
    closest: Optional[PrefixMatch] = None

    for prefix in prefixes:
        if not prefix:
            continue
        pattern = re.compile(re.escape(prefix), re.IGNORECASE)

        search_pos = start
        while search_pos < len(text):
            match = pattern.search(text, search_pos)
            if match is None:
                break

            idx, end = match.start(), match.end()
            # Boundaries are judged against the whole string, not just text[start:]
            if is_word_boundary(char_at(text, idx - 1), lenient) and is_word_boundary(char_at(text, end), lenient):
                if closest is None or idx < closest.start:
                    closest = PrefixMatch(idx, end, text[idx:end])
                break

            search_pos = idx + 1

    return closest


def match_command_phrase(
    text: str,
    start: int,
    phrases: Iterable[str],
    aliases: Optional[Dict[str, str]] = None,
    lenient: bool = False,
) -> Optional[PhraseMatch]:
    """
    Matches the longest supported phrase that begins at `start` (after
    whitespace) and ends on a word boundary.

    `aliases` maps mis-heard spellings to canonical phrases; they are only
    tried when no exact phrase matches.
    """
    pos = skip_post_trigger_punctuation(text, start) if lenient else skip_whitespace(text, start)
    if pos >= len(text):
        return None

    exact = _longest_match(text, pos, {p: p for p in phrases}, lenient)
    if exact is not None:
        return exact

    if aliases:
        fuzzy = _longest_match(text, pos, aliases, lenient)
        if fuzzy is not None:
            logger.debug(f"Corrected mis-heard command to '{fuzzy.phrase}'")
            return fuzzy

    return None


def _longest_match(text: str, pos: int, table: Dict[str, str], lenient: bool) -> Optional[PhraseMatch]:
    for spoken in sorted(table, key=len, reverse=True):
        end = pos + len(spoken)
        if end > len(text):
            continue
        if text[pos:end].lower() != spoken.lower():
            continue
        if is_word_boundary(char_at(text, end), lenient):
            return PhraseMatch(table[spoken], end)
    return None


def iter_segments(
    text: str,
    prefixes: Sequence[str],
    phrases: Iterable[str],
    aliases: Optional[Dict[str, str]] = None,
    lenient: bool = False,
) -> Iterator[Segment]:
    """
    Splits an utterance left to right into text, command and trigger segments.
    The segments' source slices tile the whole string.
    """
    phrases = list(phrases)
    pos = 0

    while pos < len(text):
        prefix_match = find_next_prefix(text, pos, prefixes, lenient)

        if prefix_match is None:
            yield Segment(SEGMENT_TEXT, text[pos:], pos, len(text))
            break

        if prefix_match.start > pos:
            yield Segment(SEGMENT_TEXT, text[pos : prefix_match.start], pos, prefix_match.start)

        phrase_match = match_command_phrase(text, prefix_match.end, phrases, aliases, lenient)

        if phrase_match is not None:
            yield Segment(
                SEGMENT_COMMAND,
                text[prefix_match.start : phrase_match.end],
                prefix_match.start,
                phrase_match.end,
                prefix=prefix_match.prefix,
                phrase=phrase_match.phrase,
            )
            pos = phrase_match.end
        else:
            logger.debug(f"Trigger '{prefix_match.prefix}' at {prefix_match.start} has no supported command")
            yield Segment(
                SEGMENT_TRIGGER,
                prefix_match.prefix,
                prefix_match.start,
                prefix_match.end,
                prefix=prefix_match.prefix,
            )
            pos = prefix_match.end


def split_segments(text: str, context: ParseContext) -> List[Segment]:
    """Segments `text` using the trigger phrases and grammar configured by `context`."""
    aliases = MISHEARD_COMMANDS if context.asr_cleanup else None
    return list(iter_segments(text, context.prefixes, SUPPORTED_COMMANDS, aliases, context.asr_cleanup))
