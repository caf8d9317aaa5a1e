import argparse
import json
import logging
import os
import platform
import shutil
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import TypeAdapter, ValidationError

from voicemark.compiler.inline import parse_inline_voicemark
from voicemark.compiler.mixed import parse_mixed_dictation_to_ops
from voicemark.compiler.transcript import parse_transcript_to_ops
from voicemark.document import apply_ops_to_text
from voicemark.models import DEFAULT_LOCALE, Operation, ParseContext
from voicemark.sentence import find_delete_start_index

OPS_ADAPTER = TypeAdapter(List[Operation])

SERVER_NAME = "voicemark"

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False):
    # stdout carries the JSON output; logs go to stderr
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _build_context(args) -> ParseContext:
    try:
        return ParseContext(
            locale=args.locale,
            prefixes=args.prefix or ["voicemark", "voice mark"],
            asr_cleanup=args.asr_cleanup,
        )
    except ValidationError as e:
        print(f"❌ Error: invalid parse options: {e}", file=sys.stderr)
        sys.exit(1)


def _print_ops(ops, render: bool):
    if render:
        print(apply_ops_to_text("", ops))
    else:
        print(OPS_ADAPTER.dump_json(ops, indent=2).decode("utf-8"))


def handle_compile(args):
    context = _build_context(args)
    ops = parse_inline_voicemark(args.text, context)
    _print_ops(ops, args.render)


def handle_mixed(args):
    context = _build_context(args)
    result = parse_mixed_dictation_to_ops(args.text, context)
    print(result.model_dump_json(indent=2))
    if result.confirm:
        print(f"⚠️  Needs confirmation: {result.confirm.prompt}", file=sys.stderr)


def handle_transcript(args):
    context = _build_context(args)

    if args.file == "-":
        transcript = sys.stdin.read()
    else:
        path = Path(args.file)
        if not path.exists():
            print(f"❌ Error: File {path} not found.", file=sys.stderr)
            sys.exit(1)
        with open(path, "r", encoding="utf-8") as f:
            transcript = f.read()

    ops = parse_transcript_to_ops(transcript, context)
    _print_ops(ops, args.render)


def handle_sentence(args):
    cursor = len(args.text) if args.cursor is None else args.cursor
    start = find_delete_start_index(args.text, cursor)
    print(start)


def _get_claude_config_path() -> Path:
    system = platform.system()
    if system == "Windows":
        return Path(os.environ["APPDATA"]) / "Claude" / "claude_desktop_config.json"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"
    return Path.home() / ".config" / "Claude" / "claude_desktop_config.json"


def _server_entry(local: bool) -> dict:
    if local:
        # Run the server from the current interpreter (editable installs)
        return {"command": sys.executable, "args": ["-m", "voicemark.server"]}
    return {"command": "uvx", "args": ["--from", "voicemark", "voicemark-mcp"]}


def handle_init(args):
    """Registers the MCP server in the Claude Desktop config."""
    config_path = _get_claude_config_path()

    if not args.local and shutil.which("uv") is None:
        print("⚠️  Warning: 'uv' tool not found. Install it or re-run with --local.", file=sys.stderr)

    data = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError:
                print(f"❌ Error: {config_path} is not valid JSON.", file=sys.stderr)
                sys.exit(1)

        backup = config_path.with_name(f"{config_path.name}.{datetime.now():%Y%m%d%H%M%S}.bak")
        shutil.copy2(config_path, backup)
        logger.info(f"Backed up existing config to {backup}")
    else:
        config_path.parent.mkdir(parents=True, exist_ok=True)

    data.setdefault("mcpServers", {})[SERVER_NAME] = _server_entry(args.local)

    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)

    print(f"✅ Registered '{SERVER_NAME}' in {config_path}. Restart Claude Desktop to use it.")


def _add_context_options(parser: argparse.ArgumentParser):
    parser.add_argument("--locale", default=DEFAULT_LOCALE, help="Command locale; en-US reads 'period' as 'full stop'")
    parser.add_argument(
        "--prefix",
        action="append",
        help="Trigger phrase (repeatable). Defaults to 'voicemark' and 'voice mark'",
    )
    parser.add_argument(
        "--asr-cleanup",
        action="store_true",
        help="Tolerate recognizer noise ([BLANK_AUDIO], 'Voice Mark, comma', mis-heard commands)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="voicemark", description="VoiceMark: dictation + voice commands -> editor ops")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log parser decisions to stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Compile one utterance with inline commands")
    compile_parser.add_argument("text")
    compile_parser.add_argument("--render", action="store_true", help="Print the resulting text instead of ops")
    _add_context_options(compile_parser)
    compile_parser.set_defaults(func=handle_compile)

    mixed_parser = subparsers.add_parser("mixed", help="Compile one utterance with confirmation gating")
    mixed_parser.add_argument("text")
    _add_context_options(mixed_parser)
    mixed_parser.set_defaults(func=handle_mixed)

    transcript_parser = subparsers.add_parser("transcript", help="Compile a transcript file ('-' for stdin)")
    transcript_parser.add_argument("file", nargs="?", default="-")
    transcript_parser.add_argument("--render", action="store_true", help="Print the resulting text instead of ops")
    _add_context_options(transcript_parser)
    transcript_parser.set_defaults(func=handle_transcript)

    sentence_parser = subparsers.add_parser("sentence", help="Where 'delete last sentence' would start")
    sentence_parser.add_argument("text")
    sentence_parser.add_argument("--cursor", type=int, default=None, help="Cursor offset (default: end of text)")
    sentence_parser.set_defaults(func=handle_sentence)

    init_parser = subparsers.add_parser("init", help="Register the MCP server with Claude Desktop")
    init_parser.add_argument("--local", action="store_true", help="Use this Python environment instead of uvx")
    init_parser.set_defaults(func=handle_init)

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
