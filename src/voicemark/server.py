import json
import logging
import sys
from typing import List, Optional

import structlog
from mcp.server.fastmcp import FastMCP
from pydantic import TypeAdapter

from voicemark.compiler.mixed import parse_mixed_dictation_to_ops
from voicemark.compiler.transcript import parse_transcript_to_ops
from voicemark.models import DEFAULT_LOCALE, Operation, ParseContext
from voicemark.sentence import find_delete_start_index

logger = structlog.get_logger(__name__)

OPS_ADAPTER = TypeAdapter(List[Operation])

# Initialize the MCP Server
mcp = FastMCP("VoiceMark Dictation Compiler")


def configure_logging():
    # CRITICAL: Any output to stdout will break the MCP JSON-RPC protocol.
    logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _context(locale: str, prefixes: Optional[List[str]], asr_cleanup: bool) -> ParseContext:
    if prefixes is None:
        return ParseContext(locale=locale, asr_cleanup=asr_cleanup)
    return ParseContext(locale=locale, prefixes=prefixes, asr_cleanup=asr_cleanup)


@mcp.tool()
def compile_dictation(
    text: str,
    locale: str = DEFAULT_LOCALE,
    prefixes: Optional[List[str]] = None,
    asr_cleanup: bool = False,
) -> str:
    """
    Compiles one dictated utterance containing VoiceMark commands into editor operations.

    Returns JSON with `immediate_ops` (safe to apply now) and, when the utterance contains a
    destructive command such as "voicemark delete last sentence", a `confirm` object whose
    `all_ops` must only be applied after the user approves `confirm.prompt`.
    Example: "Dear Sam voicemark comma voicemark new paragraph thanks"
    """
    try:
        context = _context(locale, prefixes, asr_cleanup)
        return parse_mixed_dictation_to_ops(text, context).model_dump_json()
    except Exception as e:
        logger.error(f"compile_dictation failed: {e}")
        return f"Error compiling dictation: {str(e)}"


@mcp.tool()
def compile_transcript(
    transcript: str,
    locale: str = DEFAULT_LOCALE,
    prefixes: Optional[List[str]] = None,
    asr_cleanup: bool = False,
) -> str:
    """
    Compiles a committed multi-sentence transcript into a JSON list of editor operations.
    Destructive commands are typed out as text here, never executed.
    """
    try:
        context = _context(locale, prefixes, asr_cleanup)
        ops = parse_transcript_to_ops(transcript, context)
        return OPS_ADAPTER.dump_json(ops).decode("utf-8")
    except Exception as e:
        logger.error(f"compile_transcript failed: {e}")
        return f"Error compiling transcript: {str(e)}"


@mcp.tool()
def find_sentence_start(block_text: str, cursor_offset: Optional[int] = None) -> str:
    """
    Returns where a "delete last sentence" edit would start in `block_text`
    (cursor defaults to the end), plus the sentence that would be removed.
    """
    cursor = len(block_text) if cursor_offset is None else cursor_offset
    start = find_delete_start_index(block_text, cursor)
    end = max(start, min(cursor, len(block_text)))
    return json.dumps({"start": start, "sentence": block_text[start:end]})


def main():
    configure_logging()
    # Runs the server over stdio
    mcp.run()


if __name__ == "__main__":
    main()
