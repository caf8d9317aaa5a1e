"""
Compiles one finalized utterance that may contain several embedded commands,
e.g. "My name is Marcus voicemark comma what's your name voicemark new paragraph".

Spacing rules for the emitted text:
- Text before a command loses its trailing whitespace ("Hello," not "Hello ,").
- Text after a command gets one leading space (" world"), unless the command
  broke the line or the text starts with attaching punctuation.
- Internal spacing of dictated text is left alone.
"""
from typing import List, Optional

import structlog

from voicemark.compiler.grammar import voice_command_to_editor_op
from voicemark.compiler.scanner import SEGMENT_COMMAND, SEGMENT_TEXT, split_segments
from voicemark.models import (
    ConfirmParse,
    InsertNewLine,
    InsertNewParagraph,
    InsertParse,
    InsertText,
    Operation,
    ParseContext,
)
from voicemark.spacing import normalize_spacing, should_insert_space_before
from voicemark.utils.text import strip_leading_punctuation, strip_recognizer_artifacts

logger = structlog.get_logger(__name__)


def parse_inline_voicemark(text: str, context: Optional[ParseContext] = None) -> List[Operation]:
    """
    Returns the operations for `text`, plain-text inserts interleaved with
    command operations in spoken order.

    Unsupported phrases after a trigger keep the trigger as literal text.
    Destructive commands are typed out instead of executed: confirmation
    gates only exist in parse_mixed_dictation_to_ops.
    """
    context = context or ParseContext()
    if context.asr_cleanup:
        text = strip_recognizer_artifacts(text)

    ops: List[Operation] = []

    for segment in split_segments(text, context):
        if segment.kind == SEGMENT_TEXT:
            value = segment.text.rstrip()
            if context.asr_cleanup:
                value = strip_leading_punctuation(value)
            _append_text(ops, value)

        elif segment.kind == SEGMENT_COMMAND:
            parsed = voice_command_to_editor_op(f"{segment.prefix} {segment.phrase}", context)

            if isinstance(parsed, ConfirmParse):
                logger.info(f"Confirmation skipped for '{segment.phrase}' ({parsed.prompt}); inserting as text")
                _append_text(ops, segment.phrase)
            elif isinstance(parsed, InsertParse):
                _append_text(ops, parsed.text)
            else:
                ops.extend(parsed.ops)

        else:
            # Trigger without a supported command: keep the word itself
            _append_text(ops, segment.prefix + " ")

    return ops


def _append_text(ops: List[Operation], text: str) -> None:
    if ops:
        text = text.lstrip()
    if not text.strip():
        return

    if ops:
        text = _separator(ops[-1], text) + text

    ops.append(InsertText(text=text))


def _separator(prev: Operation, text: str) -> str:
    if isinstance(prev, (InsertNewLine, InsertNewParagraph)):
        return ""
    if isinstance(prev, InsertText):
        if not prev.text or prev.text[-1].isspace():
            return ""
        return normalize_spacing(prev.text, text)
    return " " if should_insert_space_before(text) else ""
