"""Entrypoints that run format/check over one parse lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typstfmt.diagnostics import has_errors
from typstfmt.format import run_format as _run_format
from typstfmt.parser import ParseMode
from typstfmt.pipeline.result import TypstParseResult
from typstfmt.pipeline.results import CheckRunResult, FormatRunResult

if TYPE_CHECKING:
    from typstfmt.format import FormatOptions


def run_format(
    text: str,
    options: FormatOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: TypstParseResult | None = None,
) -> FormatRunResult:
    """Format ``text``, reusing ``parse`` when one is given."""
    return _run_format(text, options, mode=mode, parse=parse)


def run_check(
    text: str,
    options: FormatOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: TypstParseResult | None = None,
) -> CheckRunResult:
    """Report syntax diagnostics and whether ``text`` is already formatted."""
    format_result = _run_format(text, options, mode=mode, parse=parse)
    diagnostics = list(format_result.diagnostics)
    return CheckRunResult(
        parse=format_result.parse,
        diagnostics=diagnostics,
        has_errors=has_errors(diagnostics),
        is_formatted=not format_result.changed and not has_errors(diagnostics),
    )
