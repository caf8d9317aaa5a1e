from importlib.metadata import PackageNotFoundError, version

from voicemark.compiler.grammar import voice_command_to_editor_op
from voicemark.compiler.inline import parse_inline_voicemark
from voicemark.compiler.mixed import parse_mixed_dictation_to_ops
from voicemark.compiler.transcript import parse_transcript_to_ops
from voicemark.document import TextDocument, apply_ops_to_text
from voicemark.models import MixedDictationResult, ParseContext
from voicemark.routing import apply_final_to_editor
from voicemark.sentence import find_delete_start_index
from voicemark.spacing import normalize_spacing

try:
    __version__ = version("voicemark")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source/dev)
    __version__ = "0.0.0-dev"

__all__ = [
    "ParseContext",
    "MixedDictationResult",
    "voice_command_to_editor_op",
    "parse_inline_voicemark",
    "parse_mixed_dictation_to_ops",
    "parse_transcript_to_ops",
    "find_delete_start_index",
    "normalize_spacing",
    "TextDocument",
    "apply_ops_to_text",
    "apply_final_to_editor",
    "__version__",
]
