from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = structlog.get_logger(__name__)

DEFAULT_LOCALE = "en-GB"
DEFAULT_PREFIXES = ("voicemark", "voice mark")

# Locales that read "period" as "full stop"
ALIAS_LOCALES = frozenset({"en-us", "alt"})


class FormatStyle(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"


class FormatAction(str, Enum):
    MAKE = "make"
    UNMAKE = "unmake"
    TOGGLE = "toggle"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Editor operations ---


class Format(_Frozen):
    type: Literal["format"] = "format"
    style: FormatStyle
    action: FormatAction


class InsertText(_Frozen):
    type: Literal["insertText"] = "insertText"
    text: str


class InsertNewLine(_Frozen):
    type: Literal["insertNewLine"] = "insertNewLine"


class InsertNewParagraph(_Frozen):
    type: Literal["insertNewParagraph"] = "insertNewParagraph"


class DeleteLastWord(_Frozen):
    type: Literal["deleteLastWord"] = "deleteLastWord"


class DeleteLastSentence(_Frozen):
    type: Literal["deleteLastSentence"] = "deleteLastSentence"


class Undo(_Frozen):
    type: Literal["undo"] = "undo"


class Redo(_Frozen):
    type: Literal["redo"] = "redo"


Operation = Annotated[
    Union[
        Format,
        InsertText,
        InsertNewLine,
        InsertNewParagraph,
        DeleteLastWord,
        DeleteLastSentence,
        Undo,
        Redo,
    ],
    Field(discriminator="type"),
]


# --- Command parse results ---


class InsertParse(_Frozen):
    """No trigger phrase was found; the whole input is literal text."""

    kind: Literal["insert"] = "insert"
    text: str


class OpsParse(_Frozen):
    """
    A trigger phrase was found.
    Empty ops with MEDIUM confidence means the phrase was not in the grammar.
    """

    kind: Literal["ops"] = "ops"
    ops: List[Operation] = Field(default_factory=list)
    confidence: Confidence = Confidence.HIGH


class ConfirmParse(_Frozen):
    """A destructive command. The ops must not run until the user approves."""

    kind: Literal["confirm"] = "confirm"
    ops: List[Operation]
    prompt: str


CommandParse = Annotated[
    Union[InsertParse, OpsParse, ConfirmParse],
    Field(discriminator="kind"),
]


# --- Mixed dictation ---


class TextChunk(_Frozen):
    kind: Literal["text"] = "text"
    text: str


class CommandChunk(_Frozen):
    kind: Literal["command"] = "command"
    # Trigger phrase (as spoken) + " " + normalized command phrase
    source_text: str
    parse: CommandParse


Chunk = Annotated[Union[TextChunk, CommandChunk], Field(discriminator="kind")]


class ConfirmPayload(_Frozen):
    prompt: str
    source_text: str
    pending_ops: List[Operation]
    # immediate_ops + pending_ops, applied only if the user approves
    all_ops: List[Operation]


class MixedDictationResult(_Frozen):
    chunks: List[Chunk] = Field(default_factory=list)
    immediate_ops: List[Operation] = Field(default_factory=list)
    confirm: Optional[ConfirmPayload] = None
    pending_ops: List[Operation] = Field(default_factory=list)


# --- Configuration ---


class ParseContext(_Frozen):
    """
    Tunables for command parsing.

    locale: "en-US" (or "alt") enables the "period" alias for "full stop".
    prefixes: ordered trigger phrases, matched case-insensitively.
    asr_cleanup: tolerate recognizer noise such as "[BLANK_AUDIO]",
        "Voice Mark, comma" and common mis-hearings of command words.
    """

    locale: str = DEFAULT_LOCALE
    prefixes: List[str] = Field(default_factory=lambda: list(DEFAULT_PREFIXES))
    asr_cleanup: bool = False

    @field_validator("prefixes")
    @classmethod
    def _clean_prefixes(cls, value: List[str]) -> List[str]:
        cleaned: List[str] = []
        for prefix in value:
            prefix = " ".join(prefix.split())
            if prefix and prefix.lower() not in [p.lower() for p in cleaned]:
                cleaned.append(prefix)

        if not cleaned:
            logger.warning(f"No usable trigger prefixes in {value!r}; falling back to defaults")
            return list(DEFAULT_PREFIXES)
        return cleaned

    @property
    def uses_period_alias(self) -> bool:
        return self.locale.lower() in ALIAS_LOCALES
