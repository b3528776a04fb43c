"""Immutable green tree: kinds and texts, no positions.

Trivia are ordinary tokens here, so the concatenated token texts always
reproduce the parsed source.
"""

from dataclasses import dataclass
from typing import TypeAlias

from typstfmt.syntax import SyntaxKind


@dataclass(frozen=True, slots=True)
class GreenToken:
    kind: SyntaxKind
    text: str


@dataclass(frozen=True, slots=True)
class GreenNode:
    kind: SyntaxKind
    children: tuple["GreenElement", ...]

    @property
    def text(self) -> str:
        return "".join(child.text for child in self.children)


GreenElement: TypeAlias = GreenNode | GreenToken


class TreeBuilder:
    """Stack-based builder fed by the tree sink."""

    def __init__(self) -> None:
        self._stack: list[tuple[SyntaxKind, list[GreenElement]]] = []
        self._roots: list[GreenElement] = []

    def start_node(self, kind: SyntaxKind) -> None:
        self._stack.append((kind, []))

    def token(self, kind: SyntaxKind, text: str) -> None:
        self._push_element(GreenToken(kind=kind, text=text))

    def finish_node(self) -> None:
        if not self._stack:
            raise RuntimeError("finish_node called with empty builder stack")

        kind, children = self._stack.pop()
        self._push_element(GreenNode(kind=kind, children=tuple(children)))

    def finish(self, root_kind: SyntaxKind = SyntaxKind.MARKUP) -> GreenNode:
        if self._stack:
            raise RuntimeError("Cannot finish tree: unclosed nodes remain on stack")

        if len(self._roots) == 1 and isinstance(self._roots[0], GreenNode):
            return self._roots[0]

        return GreenNode(kind=root_kind, children=tuple(self._roots))

    def _push_element(self, element: GreenElement) -> None:
        if self._stack:
            self._stack[-1][1].append(element)
            return
        self._roots.append(element)
