from voicemark.compiler.grammar import SUPPORTED_COMMANDS, parse_command, voice_command_to_editor_op
from voicemark.compiler.inline import parse_inline_voicemark
from voicemark.compiler.mixed import parse_mixed_dictation_to_ops
from voicemark.compiler.scanner import find_next_prefix, match_command_phrase
from voicemark.compiler.transcript import parse_transcript_to_ops, split_into_chunks

__all__ = [
    "SUPPORTED_COMMANDS",
    "find_next_prefix",
    "match_command_phrase",
    "parse_command",
    "voice_command_to_editor_op",
    "parse_inline_voicemark",
    "parse_mixed_dictation_to_ops",
    "parse_transcript_to_ops",
    "split_into_chunks",
]
