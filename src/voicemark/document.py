# FILE: src/voicemark/document.py
"""
A plain-text editor adapter: replays editor operations against a string
buffer with the cursor at the end.

Real editors implement the same dispatch against their own document model;
this one is what the tests and the CLI use to show what an operation list
does to a document.
"""
import re
from typing import FrozenSet, Iterable, Set

import structlog

from voicemark.models import (
    DeleteLastSentence,
    DeleteLastWord,
    Format,
    FormatAction,
    FormatStyle,
    InsertNewLine,
    InsertNewParagraph,
    InsertText,
    Operation,
    Redo,
    Undo,
)
from voicemark.sentence import find_delete_start_index

logger = structlog.get_logger(__name__)

HARD_BREAK = "\n"
PARAGRAPH_BREAK = "\n\n"

LAST_WORD_PATTERN = re.compile(r"\S+\s*$")


class TextDocument:
    def __init__(self, text: str = ""):
        self.text = text
        self._marks: Set[FormatStyle] = set()

    @property
    def active_marks(self) -> FrozenSet[FormatStyle]:
        """Formatting that would apply to the next inserted text."""
        return frozenset(self._marks)

    def apply(self, op: Operation) -> None:
        if isinstance(op, InsertText):
            self.text += op.text
        elif isinstance(op, InsertNewLine):
            self.text += HARD_BREAK
        elif isinstance(op, InsertNewParagraph):
            self.text += PARAGRAPH_BREAK
        elif isinstance(op, Format):
            self._apply_format(op)
        elif isinstance(op, DeleteLastWord):
            self._delete_last_word()
        elif isinstance(op, DeleteLastSentence):
            self._delete_last_sentence()
        elif isinstance(op, (Undo, Redo)):
            # History belongs to the host editor
            logger.warning(f"Skipping {op.type}: TextDocument keeps no edit history")
        else:
            raise TypeError(f"Unsupported editor operation: {op!r}")

    def apply_all(self, ops: Iterable[Operation]) -> "TextDocument":
        for op in ops:
            self.apply(op)
        return self

    def _apply_format(self, op: Format) -> None:
        if op.action == FormatAction.MAKE:
            self._marks.add(op.style)
        elif op.action == FormatAction.UNMAKE:
            self._marks.discard(op.style)
        else:
            self._marks ^= {op.style}

    def _delete_last_word(self) -> None:
        match = LAST_WORD_PATTERN.search(self.text)
        if match:
            self.text = self.text[: match.start()]

    def _delete_last_sentence(self) -> None:
        # Sentences never span paragraphs
        block_start = self.text.rfind(PARAGRAPH_BREAK)
        block_start = 0 if block_start == -1 else block_start + len(PARAGRAPH_BREAK)

        block = self.text[block_start:]
        start = find_delete_start_index(block, len(block))
        logger.debug(f"Deleting last sentence: '{block[start:][:50]}'")
        self.text = self.text[: block_start + start]


def apply_ops_to_text(text: str, ops: Iterable[Operation]) -> str:
    """Applies `ops` to `text` and returns the resulting text."""
    return TextDocument(text).apply_all(ops).text
