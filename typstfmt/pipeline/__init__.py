"""Shared parse carrier and lazy pipeline entrypoint exports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from typstfmt.parser.options import ParseMode
from typstfmt.pipeline.result import TypstParseResult
from typstfmt.pipeline.results import CheckRunResult, FormatRunResult

if TYPE_CHECKING:
    from typstfmt.format.options import FormatOptions


def run_format(
    text: str,
    options: FormatOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: TypstParseResult | None = None,
) -> FormatRunResult:
    from typstfmt.pipeline.entrypoints import run_format as _run_format

    return _run_format(text, options, mode=mode, parse=parse)


def run_check(
    text: str,
    options: FormatOptions | None = None,
    *,
    mode: ParseMode | None = None,
    parse: TypstParseResult | None = None,
) -> CheckRunResult:
    from typstfmt.pipeline.entrypoints import run_check as _run_check

    return _run_check(text, options, mode=mode, parse=parse)


__all__ = [
    "CheckRunResult",
    "FormatRunResult",
    "TypstParseResult",
    "run_check",
    "run_format",
]
