"""Lossless tree sink for parser events."""

from dataclasses import dataclass

from typstfmt.cst import GreenNode, TreeBuilder
from typstfmt.diagnostics import Diagnostic
from typstfmt.lexer import Trivia
from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextSize


@dataclass(frozen=True, slots=True)
class ParsedGreenTree:
    root: GreenNode
    diagnostics: list[Diagnostic]


class LosslessTreeSink:
    """Converts parser events plus recorded trivia into a green tree.

    Trivia becomes ordinary sibling tokens. A gap is filled at the outermost
    level that encloses it: trivia before a node start lands outside that node,
    and trivia after a node's last token is only flushed once the next token
    (or the end of the root) is reached.
    """

    def __init__(
        self,
        text: str,
        trivia: list[Trivia],
        builder: TreeBuilder | None = None,
    ) -> None:
        self._text = text
        self._trivia = trivia
        self._text_pos = TextSize.from_int(0)
        self._trivia_pos = 0
        self._parents_count = 0
        self._errors: list[Diagnostic] = []
        self._builder = builder if builder is not None else TreeBuilder()

    def token(self, kind: SyntaxKind, end: TextSize) -> None:
        self._eat_trivia()
        self._builder.token(kind, self._text[self._text_pos.value : end.value])
        self._text_pos = end

    def start_node(self, kind: SyntaxKind) -> None:
        if self._parents_count > 0:
            self._eat_trivia()
        self._builder.start_node(kind)
        self._parents_count += 1

    def finish_node(self) -> None:
        self._parents_count -= 1
        if self._parents_count < 0:
            raise RuntimeError("finish_node called more often than start_node")

        if self._parents_count == 0:
            self._eat_trivia()
            if self._text_pos.value != len(self._text):
                raise RuntimeError(
                    f"Tree sink stopped at offset {self._text_pos.value} of {len(self._text)}"
                )

        self._builder.finish_node()

    def errors(self, errors: list[Diagnostic]) -> None:
        self._errors = list(errors)

    def finish(self) -> ParsedGreenTree:
        return ParsedGreenTree(root=self._builder.finish(), diagnostics=self._errors)

    def _eat_trivia(self) -> None:
        while self._trivia_pos < len(self._trivia):
            trivia = self._trivia[self._trivia_pos]
            if trivia.range.start != self._text_pos:
                break

            self._builder.token(trivia.kind, self._text[trivia.range.start.value : trivia.range.end.value])
            self._text_pos = trivia.range.end
            self._trivia_pos += 1
