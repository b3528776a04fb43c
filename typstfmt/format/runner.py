"""Format runner over a shared Typst parse result."""

from __future__ import annotations

import structlog

from typstfmt.format.options import FormatOptions
from typstfmt.format.visitor import format_tree
from typstfmt.parser import ParseMode, parse_result
from typstfmt.pipeline.result import TypstParseResult
from typstfmt.pipeline.results import FormatRunResult

logger = structlog.get_logger(__name__)


def run_format(
    text: str,
    options: FormatOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: TypstParseResult | None = None,
) -> FormatRunResult:
    """Run formatting from a single parse lifecycle.

    Source with syntax errors is returned unchanged together with its diagnostics.
    """
    resolved_parse = _resolve_parse(text, mode=mode, parse=parse)
    resolved_options = options if options is not None else FormatOptions()

    if resolved_parse.has_errors:
        logger.info(
            "Skipping formatting of source with syntax errors",
            error_count=len(resolved_parse.diagnostics),
        )
        formatted_text = resolved_parse.source_text
    else:
        formatted_text = format_tree(resolved_parse.syntax_root(), resolved_options)

    return FormatRunResult(
        parse=resolved_parse,
        formatted_text=formatted_text,
        diagnostics=list(resolved_parse.diagnostics),
        changed=formatted_text != resolved_parse.source_text,
    )


def format_str(text: str, options: FormatOptions | None = None, *, mode: ParseMode | None = None) -> str:
    """Format Typst ``text`` and return the result."""
    return run_format(text, options, mode=mode).formatted_text


def _resolve_parse(
    text: str,
    *,
    mode: ParseMode | None,
    parse: TypstParseResult | None,
) -> TypstParseResult:
    if parse is not None:
        if mode is not None:
            raise ValueError("Pass either parse or mode, not both")
        return parse
    return parse_result(text, mode=mode if mode is not None else ParseMode.MARKUP)
