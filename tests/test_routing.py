from structlog.testing import capture_logs

from voicemark.document import TextDocument
from voicemark.models import DeleteLastWord, InsertNewParagraph, InsertText
from voicemark.routing import apply_final_to_editor


class Recorder:
    def __init__(self):
        self.ops = []

    def __call__(self, op):
        self.ops.append(op)


def test_no_dispatcher(ctx):
    result = apply_final_to_editor("Hello", None, ctx)

    assert result.kind == "no-dispatch"
    assert result.operations_dispatched == 0


def test_plain_text_gets_trailing_space(ctx):
    dispatch = Recorder()
    result = apply_final_to_editor("Hello world", dispatch, ctx)

    assert result.kind == "insert"
    assert dispatch.ops == [InsertText(text="Hello world ")]


def test_command_ops_are_dispatched(ctx):
    dispatch = Recorder()
    result = apply_final_to_editor("voicemark new paragraph", dispatch, ctx)

    assert result.kind == "ops"
    assert result.operations_dispatched == 1
    assert dispatch.ops == [InsertNewParagraph()]


def test_unknown_command_dispatches_nothing(ctx):
    dispatch = Recorder()
    result = apply_final_to_editor("voicemark sing a song", dispatch, ctx)

    assert result.kind == "ops"
    assert result.operations_dispatched == 0
    assert dispatch.ops == []


def test_destructive_command_inserts_raw_text(ctx):
    dispatch = Recorder()
    with capture_logs() as logs:
        result = apply_final_to_editor("voicemark delete last sentence", dispatch, ctx)

    assert result.kind == "confirm"
    assert dispatch.ops == [InsertText(text="voicemark delete last sentence")]
    assert result.confirm_warning == (
        'Confirm case skipped for safety: "Delete the last sentence?". Raw text inserted instead.'
    )
    assert logs[0]["log_level"] == "warning"


def test_drives_a_text_document(ctx):
    doc = TextDocument()
    for segment in ["Hello wrold", "voicemark delete last word", "world", "voicemark full stop"]:
        apply_final_to_editor(segment, doc.apply, ctx)

    assert doc.text == "Hello world ."


def test_delete_last_word_dispatch(ctx):
    dispatch = Recorder()
    apply_final_to_editor("Voice Mark delete last word", dispatch, ctx)
    assert dispatch.ops == [DeleteLastWord()]
