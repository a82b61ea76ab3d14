#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/cli.py
"""Command-line interface for richnote.

Subcommands
-----------
convert
    Parse an HTML, Markdown or text file and render it as HTML, Markdown or
    plain text.
sanitize
    Sanitize a note file and print the sanitized record as JSON.
export
    Print the file name a note would be exported under.

Examples
--------
    $ richnote convert page.html --from html --to markdown
    $ richnote sanitize clipping.html --mime-type text/html
    $ richnote export todo.md --mime-type text/markdown

"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from richnote import __version__
from richnote.ast.nodes import Document, Element, Text
from richnote.exceptions import FileReadError, RichNoteError
from richnote.logging_utils import configure_logging
from richnote.notes import wrap_in_file
from richnote.parsers.html import HtmlToTreeConverter
from richnote.parsers.markdown import MarkdownToTreeConverter
from richnote.renderers.base import BaseRenderer
from richnote.renderers.html import HtmlRenderer
from richnote.renderers.markdown import MarkdownRenderer
from richnote.renderers.plaintext import PlainTextRenderer
from richnote.transforms.normalization import NormalizationEngine
from richnote.utils.html_sanitizer import sanitize_html, sanitize_note

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_FILE_ERROR = 3

_RENDERERS: dict[str, type[BaseRenderer]] = {
    "html": HtmlRenderer,
    "markdown": MarkdownRenderer,
    "plain": PlainTextRenderer,
}


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its subcommands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    common.add_argument("--log-file", help="Also write log messages to this file")
    common.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")

    parser = argparse.ArgumentParser(
        prog="richnote",
        description="Convert, sanitize and export rich-text notes.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", parents=[common], help="Convert a note between formats")
    convert.add_argument("input", help="Input file, or - for standard input")
    convert.add_argument("--from", dest="source", choices=["html", "markdown", "text"], default="html")
    convert.add_argument("--to", dest="target", choices=sorted(_RENDERERS), default="markdown")
    convert.add_argument("--raw", action="store_true", help="Skip sanitizing HTML input")
    convert.add_argument("-o", "--output", help="Output file (default: standard output)")

    sanitize = subparsers.add_parser("sanitize", parents=[common], help="Sanitize a note and print it as JSON")
    sanitize.add_argument("input", help="Input file, or - for standard input")
    sanitize.add_argument("--mime-type", default="text/html", help="MIME type of the note (default: text/html)")
    sanitize.add_argument("--title", help="Title to keep instead of extracting one")

    export = subparsers.add_parser("export", parents=[common], help="Print the export file name of a note")
    export.add_argument("input", help="Input file, or - for standard input")
    export.add_argument("--mime-type", default="text/html", help="MIME type of the note (default: text/html)")

    return parser


def _setup_logging(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _read_input(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    try:
        return Path(name).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileReadError(f"Failed to read '{name}': {e}", file_name=name, original_error=e) from e


def _convert(parsed_args: argparse.Namespace) -> int:
    text = _read_input(parsed_args.input)
    if parsed_args.source == "html":
        if not parsed_args.raw:
            text = sanitize_html(text).content
        document = HtmlToTreeConverter().convert_to_tree(text)
    elif parsed_args.source == "markdown":
        document = MarkdownToTreeConverter().convert_to_tree(text)
    else:
        document = Document(children=[Element("paragraph", [Text(line)]) for line in text.split("\n")])
        NormalizationEngine().normalize(document)

    renderer = _RENDERERS[parsed_args.target]()
    if parsed_args.output:
        renderer.render(document, parsed_args.output)
    else:
        print(renderer.render_to_string(document))
    return EXIT_SUCCESS


def _sanitize(parsed_args: argparse.Namespace) -> int:
    raw = {
        "content": _read_input(parsed_args.input),
        "mime_type": parsed_args.mime_type,
        "title": parsed_args.title,
    }
    note = sanitize_note(raw)
    print(json.dumps(note.to_dict(), ensure_ascii=False, indent=2))
    return EXIT_SUCCESS


def _export(parsed_args: argparse.Namespace) -> int:
    raw = {"content": _read_input(parsed_args.input), "mime_type": parsed_args.mime_type}
    note = sanitize_note(raw)
    print(wrap_in_file(note).name)
    return EXIT_SUCCESS


_COMMANDS = {
    "convert": _convert,
    "sanitize": _sanitize,
    "export": _export,
}


def main(args: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit code."""
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        # --help and --version exit with 0, usage errors with 2
        return e.code if isinstance(e.code, int) else EXIT_USAGE_ERROR
    _setup_logging(parsed_args)

    try:
        return _COMMANDS[parsed_args.command](parsed_args)
    except FileReadError as e:
        logger.error("%s", e)
        return EXIT_FILE_ERROR
    except RichNoteError as e:
        logger.error("%s", e)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
