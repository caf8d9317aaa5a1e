from typing import List, Optional

import structlog

from voicemark.compiler.inline import parse_inline_voicemark
from voicemark.models import InsertText, Operation, ParseContext
from voicemark.utils.text import SENTENCE_TERMINATORS, is_terminator

logger = structlog.get_logger(__name__)

NEWLINE_CHUNK = "\n"


def parse_transcript_to_ops(transcript: str, context: Optional[ParseContext] = None) -> List[Operation]:
    """
    Compiles a committed multi-sentence transcript into editor operations.

    The transcript is cut at newlines and at '.', '?' and '!'; each piece of
    text goes through parse_inline_voicemark. Terminators and newlines are
    inserted as they are, with one space after a terminator when more
    text follows on the same line.
    """
    if not transcript.strip():
        return []

    context = context or ParseContext()
    chunks = split_into_chunks(transcript)
    logger.debug(f"Transcript split into {len(chunks)} chunks")

    ops: List[Operation] = []
    for i, chunk in enumerate(chunks):
        next_chunk = chunks[i + 1] if i + 1 < len(chunks) else None

        if chunk == NEWLINE_CHUNK:
            ops.append(InsertText(text=NEWLINE_CHUNK))
            continue

        if is_terminator(chunk):
            ops.append(InsertText(text=chunk))
            if _should_insert_space_after(next_chunk):
                ops.append(InsertText(text=" "))
            continue

        ops.extend(parse_inline_voicemark(chunk, context))

    return ops


def _should_insert_space_after(next_chunk: Optional[str]) -> bool:
    if next_chunk is None:
        return False
    if next_chunk == NEWLINE_CHUNK:
        return False
    return not is_terminator(next_chunk)


def split_into_chunks(text: str) -> List[str]:
    """
    Splits text into trimmed line/sentence pieces.
    Terminators become their own one-character chunks and a "\\n" chunk
    separates consecutive lines.
    """
    chunks: List[str] = []
    lines = text.split(NEWLINE_CHUNK)

    for i, line in enumerate(lines):
        chunks.extend(_split_sentences(line))
        if i < len(lines) - 1:
            chunks.append(NEWLINE_CHUNK)

    return chunks


def _split_sentences(line: str) -> List[str]:
    parts: List[str] = []
    current = []

    for char in line:
        if char in SENTENCE_TERMINATORS:
            piece = "".join(current).strip()
            if piece:
                parts.append(piece)
            parts.append(char)
            current = []
        else:
            current.append(char)

    piece = "".join(current).strip()
    if piece:
        parts.append(piece)

    return parts
