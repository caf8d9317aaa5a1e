"""
Routes one finalized recognizer segment to an editor.

The editor integration calls this once per final result; the dispatcher is
the editor adapter's apply function (or None while the editor is not ready).
"""
from typing import Callable, Literal, Optional

import structlog
from pydantic import BaseModel

from voicemark.compiler.grammar import voice_command_to_editor_op
from voicemark.models import ConfirmParse, InsertParse, InsertText, Operation, OpsParse, ParseContext

logger = structlog.get_logger(__name__)

Dispatch = Callable[[Operation], None]


class ApplyResult(BaseModel):
    kind: Literal["insert", "ops", "confirm", "no-dispatch"]
    operations_dispatched: int = 0
    confirm_warning: Optional[str] = None


def apply_final_to_editor(
    text: str,
    dispatch: Optional[Dispatch],
    context: Optional[ParseContext] = None,
) -> ApplyResult:
    """
    Parses `text` as a single command and dispatches the resulting ops.

    Literal text is inserted with a trailing space so the next segment
    doesn't run into it. A destructive command is never executed here:
    there is no one to confirm it, so the raw text is inserted instead.
    """
    if dispatch is None:
        logger.debug("Editor not ready; nothing dispatched")
        return ApplyResult(kind="no-dispatch")

    parsed = voice_command_to_editor_op(text, context)

    if isinstance(parsed, InsertParse):
        dispatch(InsertText(text=parsed.text + " "))
        return ApplyResult(kind="insert", operations_dispatched=1)

    if isinstance(parsed, OpsParse):
        for op in parsed.ops:
            dispatch(op)
        return ApplyResult(kind="ops", operations_dispatched=len(parsed.ops))

    if isinstance(parsed, ConfirmParse):
        warning = f'Confirm case skipped for safety: "{parsed.prompt}". Raw text inserted instead.'
        logger.warning(warning)
        dispatch(InsertText(text=text))
        return ApplyResult(kind="confirm", operations_dispatched=1, confirm_warning=warning)

    raise TypeError(f"Unsupported command parse: {parsed!r}")
