"""
Compiles mixed dictation (plain text + VoiceMark commands) for one utterance,
gating destructive commands behind a user confirmation.

Unlike the inline compiler, the result keeps the chunk decomposition and
splits the operations in two:

- immediate_ops: everything before the first destructive command
- pending_ops:   the destructive command and everything after it

The UI applies immediate_ops right away and confirm.all_ops only if the user
approves confirm.prompt.
"""
from typing import List, Optional

import structlog

from voicemark.compiler.grammar import voice_command_to_editor_op
from voicemark.compiler.scanner import SEGMENT_COMMAND, SEGMENT_TEXT, split_segments
from voicemark.models import (
    Chunk,
    CommandChunk,
    ConfirmParse,
    ConfirmPayload,
    InsertNewLine,
    InsertNewParagraph,
    InsertParse,
    InsertText,
    MixedDictationResult,
    Operation,
    OpsParse,
    ParseContext,
    TextChunk,
)
from voicemark.utils.text import (
    strip_leading_punctuation,
    strip_recognizer_artifacts,
    strip_trailing_punctuation,
)

logger = structlog.get_logger(__name__)

PUNCTUATION_OP_CHARS = ",.?!:;-"

# What the previous chunk left at the end of the document, for spacing
_PREV_NONE = "none"
_PREV_TEXT = "text"
_PREV_COMMAND = "command"
_PREV_PUNCTUATION = "punctuation"
_PREV_NEWLINE = "newline"


def parse_mixed_dictation_to_ops(text: str, context: Optional[ParseContext] = None) -> MixedDictationResult:
    """
    Splits `text` into text and command chunks and compiles them.

    parse_mixed_dictation_to_ops("X voicemark delete last sentence Y")
        immediate_ops == [InsertText("X")]
        pending_ops   == [DeleteLastSentence(), InsertText(" Y")]
    """
    context = context or ParseContext()
    if context.asr_cleanup:
        text = strip_recognizer_artifacts(text)

    if not text.strip():
        return MixedDictationResult()

    chunks = build_chunks(text, context)
    return _build_result(chunks, context)


def build_chunks(text: str, context: ParseContext) -> List[Chunk]:
    chunks: List[Chunk] = []

    for segment in split_segments(text, context):
        if segment.kind == SEGMENT_TEXT:
            value = segment.text.strip()
            if context.asr_cleanup:
                # "Voice Mark comma. And then" -> the recognizer's "." is redundant
                value = strip_leading_punctuation(value)
            if value:
                chunks.append(TextChunk(text=value))

        elif segment.kind == SEGMENT_COMMAND:
            source_text = f"{segment.prefix} {segment.phrase}"
            chunks.append(
                CommandChunk(
                    source_text=source_text,
                    parse=voice_command_to_editor_op(source_text, context),
                )
            )

        else:
            chunks.append(TextChunk(text=segment.prefix))

    return chunks


def _is_punctuation_op(op: Operation) -> bool:
    return isinstance(op, InsertText) and len(op.text) == 1 and op.text in PUNCTUATION_OP_CHARS


def _is_newline_op(op: Operation) -> bool:
    return isinstance(op, (InsertNewLine, InsertNewParagraph))


def _build_result(chunks: List[Chunk], context: ParseContext) -> MixedDictationResult:
    immediate_ops: List[Operation] = []
    pending_ops: List[Operation] = []
    confirm_prompt: Optional[str] = None
    confirm_source: Optional[str] = None

    prev_kind = _PREV_NONE

    def target() -> List[Operation]:
        return pending_ops if confirm_prompt is not None else immediate_ops

    def add_text(value: str) -> None:
        if prev_kind not in (_PREV_NONE, _PREV_NEWLINE):
            value = " " + value
        target().append(InsertText(text=value))

    for chunk in chunks:
        if isinstance(chunk, TextChunk):
            add_text(chunk.text)
            prev_kind = _PREV_TEXT
            continue

        parse = chunk.parse
        produces_punctuation = (
            isinstance(parse, OpsParse) and len(parse.ops) == 1 and _is_punctuation_op(parse.ops[0])
        )

        if produces_punctuation and prev_kind == _PREV_TEXT and context.asr_cleanup:
            _drop_duplicate_punctuation(target())

        if isinstance(parse, ConfirmParse):
            if confirm_prompt is None:
                confirm_prompt = parse.prompt
                confirm_source = chunk.source_text
                logger.info(f"Confirmation required for '{chunk.source_text}': {parse.prompt}")
            else:
                logger.info(f"'{chunk.source_text}' joins the pending confirmation for '{confirm_source}'")
            pending_ops.extend(parse.ops)
            prev_kind = _PREV_COMMAND

        elif isinstance(parse, OpsParse):
            target().extend(parse.ops)
            if len(parse.ops) == 1 and _is_newline_op(parse.ops[0]):
                prev_kind = _PREV_NEWLINE
            elif produces_punctuation:
                prev_kind = _PREV_PUNCTUATION
            else:
                prev_kind = _PREV_COMMAND

        elif isinstance(parse, InsertParse):
            add_text(parse.text)
            prev_kind = _PREV_TEXT

    confirm = None
    if confirm_prompt is not None:
        confirm = ConfirmPayload(
            prompt=confirm_prompt,
            source_text=confirm_source,
            pending_ops=list(pending_ops),
            all_ops=immediate_ops + pending_ops,
        )

    return MixedDictationResult(
        chunks=chunks,
        immediate_ops=immediate_ops,
        confirm=confirm,
        pending_ops=pending_ops,
    )


def _drop_duplicate_punctuation(ops: List[Operation]) -> None:
    """
    The recognizer often punctuates on its own ("Hello." + "voicemark full stop").
    Strips trailing punctuation from the last text insert so it isn't doubled.
    """
    if not ops or not isinstance(ops[-1], InsertText):
        return

    last = ops[-1].text
    if not any(ch.isalnum() for ch in last):
        return

    stripped = strip_trailing_punctuation(last)
    if stripped == last:
        return

    if stripped.strip():
        ops[-1] = InsertText(text=stripped)
    else:
        ops.pop()
