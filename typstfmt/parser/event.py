"""Parser events.

The grammar never builds nodes directly. It appends start / token / finish
events, and a node that turns out to wrap an already completed sibling (a
binary expression around its left operand, a call around its callee) is
linked through ``forward_parent`` instead of being moved.
"""

from dataclasses import dataclass
from typing import Protocol, TypeAlias

from typstfmt.diagnostics import Diagnostic
from typstfmt.syntax import SyntaxKind
from typstfmt.text import TextSize


@dataclass(frozen=True, slots=True)
class StartEvent:
    kind: SyntaxKind
    # Relative offset to the start event of the node that wraps this one.
    forward_parent: int | None = None

    @property
    def is_tombstone(self) -> bool:
        return self.kind == SyntaxKind.TOMBSTONE


TOMBSTONE = StartEvent(SyntaxKind.TOMBSTONE)


@dataclass(frozen=True, slots=True)
class FinishEvent:
    pass


@dataclass(frozen=True, slots=True)
class TokenEvent:
    kind: SyntaxKind
    end: TextSize


Event: TypeAlias = StartEvent | FinishEvent | TokenEvent


class TreeSink(Protocol):
    def token(self, kind: SyntaxKind, end: TextSize) -> None: ...

    def start_node(self, kind: SyntaxKind) -> None: ...

    def finish_node(self) -> None: ...

    def errors(self, errors: list[Diagnostic]) -> None: ...


def process_events(sink: TreeSink, events: list[Event], errors: list[Diagnostic]) -> None:
    sink.errors(errors)

    for idx, event in enumerate(events):
        match event:
            case StartEvent() if event.is_tombstone:
                continue
            case StartEvent():
                for kind in reversed(_take_forward_chain(events, idx)):
                    sink.start_node(kind)
            case FinishEvent():
                sink.finish_node()
            case TokenEvent(kind=kind, end=end):
                sink.token(kind, end)


def _take_forward_chain(events: list[Event], idx: int) -> list[SyntaxKind]:
    """Collect the node kinds linked from ``idx``, innermost first.

    Every linked parent is replaced by a tombstone so it is opened exactly once.
    """
    event = events[idx]
    assert isinstance(event, StartEvent)
    chain = [event.kind]

    while event.forward_parent is not None:
        idx += event.forward_parent
        if idx >= len(events):
            raise RuntimeError("Invalid forward_parent offset in parser events")
        event = events[idx]
        if not isinstance(event, StartEvent):
            raise RuntimeError("forward_parent must point to StartEvent")

        events[idx] = TOMBSTONE
        if not event.is_tombstone:
            chain.append(event.kind)

    return chain
