"""Results returned by `run_format` and `run_check`."""

from __future__ import annotations

from dataclasses import dataclass

from typstfmt.diagnostics import Diagnostic
from typstfmt.pipeline.result import TypstParseResult


@dataclass(frozen=True, slots=True)
class FormatRunResult:
    """Formatted text plus the parse it came from; `changed` compares against the source."""

    parse: TypstParseResult
    formatted_text: str
    diagnostics: list[Diagnostic]
    changed: bool


@dataclass(frozen=True, slots=True)
class CheckRunResult:
    """Outcome of `typstfmt --check` for one source: syntax errors and whether it is canonical."""

    parse: TypstParseResult
    diagnostics: list[Diagnostic]
    has_errors: bool
    is_formatted: bool
