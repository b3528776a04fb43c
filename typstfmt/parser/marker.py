"""Markers for event-based parsing."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from typstfmt.parser.event import FinishEvent, StartEvent
from typstfmt.syntax import SyntaxKind

if TYPE_CHECKING:
    from typstfmt.parser.parser import Parser


@dataclass(slots=True)
class Marker:
    """An open node: a placeholder start event waiting for its kind."""

    pos: int
    # Start event of the completed node this marker was created to wrap.
    child_idx: int | None = None

    def complete(self, parser: Parser, kind: SyntaxKind) -> CompletedMarker:
        parser.events[self.pos] = replace(_start_event(parser, self.pos), kind=kind)
        parser.events.append(FinishEvent())
        return CompletedMarker(start_pos=self.pos)

    def abandon(self, parser: Parser) -> None:
        """Drop the marker; its children end up in the enclosing node."""
        if self.pos == len(parser.events) - 1 and _start_event(parser, self.pos).forward_parent is None:
            parser.events.pop()

        if self.child_idx is not None:
            child = _start_event(parser, self.child_idx)
            parser.events[self.child_idx] = replace(child, forward_parent=None)


@dataclass(frozen=True, slots=True)
class CompletedMarker:
    start_pos: int

    def kind(self, parser: Parser) -> SyntaxKind:
        return _start_event(parser, self.start_pos).kind

    def change_kind(self, parser: Parser, new_kind: SyntaxKind) -> None:
        parser.events[self.start_pos] = replace(_start_event(parser, self.start_pos), kind=new_kind)

    def precede(self, parser: Parser) -> Marker:
        """Open a new node that will wrap this completed one."""
        outer = parser.start()
        distance = outer.pos - self.start_pos
        if distance <= 0:
            raise RuntimeError("Invalid precede distance")

        parser.events[self.start_pos] = replace(_start_event(parser, self.start_pos), forward_parent=distance)
        outer.child_idx = self.start_pos
        return outer


def _start_event(parser: Parser, pos: int) -> StartEvent:
    event = parser.events[pos]
    if not isinstance(event, StartEvent):
        raise RuntimeError("Marker must point to a StartEvent")
    return event
