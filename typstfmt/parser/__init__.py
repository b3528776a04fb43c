"""Parser infrastructure (token source + event-based parser + tree sink)."""

from typstfmt.parser.event import (
    Event,
    FinishEvent,
    StartEvent,
    TokenEvent,
    process_events,
)
from typstfmt.parser.grammar import parse_root
from typstfmt.parser.marker import CompletedMarker, Marker
from typstfmt.parser.options import NewlineMode, ParseMode
from typstfmt.parser.parse_lists import ParseNodeList
from typstfmt.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from typstfmt.parser.parser import Parser, ParserCheckpoint, ParserProgress
from typstfmt.parser.token_source import TokenSource, TokenSourceCheckpoint
from typstfmt.parser.tree_sink import LosslessTreeSink, ParsedGreenTree
from typstfmt.parser.typst import parse, parse_result

__all__ = [
    "CompletedMarker",
    "Event",
    "FinishEvent",
    "LosslessTreeSink",
    "Marker",
    "NewlineMode",
    "ParseMode",
    "ParseNodeList",
    "ParseRecoveryTokenSet",
    "ParsedGreenTree",
    "Parser",
    "ParserCheckpoint",
    "ParserProgress",
    "RecoveryError",
    "StartEvent",
    "TokenEvent",
    "TokenSource",
    "TokenSourceCheckpoint",
    "parse",
    "parse_result",
    "parse_root",
    "process_events",
]
