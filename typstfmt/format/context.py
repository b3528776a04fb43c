"""Whitespace-collapsing state shared by one formatting run."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from typstfmt.format.options import FormatOptions

logger = structlog.get_logger(__name__)

# Newlines allowed in a row, i.e. at most one blank line.
MAX_NEWLINE_RUN = 2


@dataclass(slots=True)
class FormatContext:
    """Mutable per-run state.

    ``spacing`` is set while the last emission was a collapsible space and
    ``newline_run`` counts the newlines emitted since the last other text.
    Build a fresh context for every run.
    """

    indent_width: int
    max_line_length: int
    spacing: bool = False
    newline_run: int = 0

    @classmethod
    def from_options(cls, options: FormatOptions) -> FormatContext:
        return cls(indent_width=options.indent_width, max_line_length=options.max_line_length)

    def process(self, text: str) -> str:
        """Return what should be emitted for ``text``; repeated spaces and newlines collapse."""
        match text:
            case " ":
                if self.spacing:
                    logger.debug("Suppressed space")
                    return ""
                self.spacing = True
                return text
            case "\n":
                if self.newline_run < MAX_NEWLINE_RUN:
                    self.newline_run += 1
                    return text
                logger.debug("Suppressed newline")
                return ""
            case _:
                self.pushed_raw()
                return text

    def pushed_raw(self) -> None:
        """Forget collapsing state after text was emitted without `process`."""
        self.spacing = False
        self.newline_run = 0

    @property
    def indent(self) -> str:
        return " " * self.indent_width
