"""Parse carrier shared by the formatter and the checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from typstfmt.cst import from_green
from typstfmt.diagnostics import has_errors
from typstfmt.parser.options import ParseMode
from typstfmt.parser.tree_sink import ParsedGreenTree

if TYPE_CHECKING:
    from typstfmt.cst import GreenNode, SyntaxNode
    from typstfmt.diagnostics import Diagnostic


@dataclass(slots=True)
class TypstParseResult:
    """One parse of a Typst source, consumed by any number of runs."""

    source_text: str
    parsed: ParsedGreenTree
    mode: ParseMode = ParseMode.MARKUP
    _syntax_root: SyntaxNode | None = field(default=None, init=False, repr=False)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    def green_root(self) -> GreenNode:
        return self.parsed.root

    def syntax_root(self) -> SyntaxNode:
        if self._syntax_root is None:
            self._syntax_root = from_green(self.parsed.root, self.source_text)
        return self._syntax_root
