"""Command line entry point: format Typst files or stdin."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import structlog

from typstfmt.diagnostics import Diagnostic, has_errors
from typstfmt.format import FormatOptions, load_format_options
from typstfmt.logging import configure_logging
from typstfmt.pipeline import run_check, run_format
from typstfmt.text import line_col

logger = structlog.get_logger(__name__)

STDIN_PATH = "-"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="typstfmt", description="Format Typst source files.")
    parser.add_argument("paths", nargs="*", help="files to format in place; '-' or nothing reads stdin")
    parser.add_argument("--check", action="store_true", help="report files that would be reformatted")
    parser.add_argument("--stdout", action="store_true", help="print formatted files instead of rewriting them")
    parser.add_argument("--config", type=Path, help="path to a typstfmt.toml file")
    parser.add_argument("--indent-width", type=int, help="spaces per indentation level")
    parser.add_argument("--max-line-length", type=int, help="width that breaks argument lists")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more logging (repeatable)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbosity=args.verbose)

    try:
        options = _resolve_options(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    paths: list[str] = args.paths or [STDIN_PATH]
    exit_code = 0
    for path in paths:
        try:
            if path == STDIN_PATH:
                ok = _process_stdin(options, check=args.check)
            else:
                ok = _process_file(Path(path), options, check=args.check, to_stdout=args.stdout)
        except OSError as exc:
            print(f"error: {exc}", file=sys.stderr)
            ok = False
        if not ok:
            exit_code = 1
    return exit_code


def _resolve_options(args: argparse.Namespace) -> FormatOptions:
    options = load_format_options(args.config)
    overrides = {
        name: value
        for name, value in (("indent_width", args.indent_width), ("max_line_length", args.max_line_length))
        if value is not None
    }
    return dataclasses.replace(options, **overrides)


def _process_stdin(options: FormatOptions, *, check: bool) -> bool:
    text = sys.stdin.read()
    return _process_text(text, "<stdin>", options, check=check, write=sys.stdout.write)


def _process_file(path: Path, options: FormatOptions, *, check: bool, to_stdout: bool) -> bool:
    text = path.read_text(encoding="utf-8")
    if to_stdout:
        return _process_text(text, str(path), options, check=check, write=sys.stdout.write)

    def write_back(formatted: str) -> None:
        if formatted != text:
            logger.info("Reformatted file", path=str(path))
            path.write_text(formatted, encoding="utf-8")

    return _process_text(text, str(path), options, check=check, write=write_back)


def _process_text(text: str, label: str, options: FormatOptions, *, check: bool, write: Callable[[str], None]) -> bool:
    if check:
        result = run_check(text, options)
        _report_diagnostics(label, text, result.diagnostics)
        if result.has_errors:
            return False
        if not result.is_formatted:
            print(f"would reformat {label}")
            return False
        return True

    format_result = run_format(text, options)
    _report_diagnostics(label, text, format_result.diagnostics)
    if has_errors(format_result.diagnostics):
        return False
    write(format_result.formatted_text)
    return True


def _report_diagnostics(label: str, text: str, diagnostics: list[Diagnostic]) -> None:
    for diagnostic in diagnostics:
        line, column = line_col(text, diagnostic.range.start)
        print(
            f"{label}:{line}:{column}: {diagnostic.severity}[{diagnostic.code}] {diagnostic.message}",
            file=sys.stderr,
        )
