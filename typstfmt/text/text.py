"""Character offsets into Typst source text.

Offsets index Python strings directly, so a range slices the source as-is.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class TextSize:
    """Non-negative character offset."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"Offset cannot be negative: {self.value}")

    @staticmethod
    def from_int(value: int) -> "TextSize":
        return TextSize(value)

    def __repr__(self) -> str:
        return f"TextSize({self.value})"


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """Half-open span ``[start, end)`` with ``0 <= start <= end``."""

    _start: int
    _end: int

    def __post_init__(self) -> None:
        if self._start < 0 or self._start > self._end:
            raise ValueError(f"Invalid range {self._start}..{self._end}")

    @staticmethod
    def from_offsets(start: int, end: int) -> "TextRange":
        return TextRange(start, end)

    @staticmethod
    def empty(offset: TextSize) -> "TextRange":
        """Zero-width range, used to point diagnostics between two tokens."""
        return TextRange(offset.value, offset.value)

    @property
    def start(self) -> TextSize:
        return TextSize(self._start)

    @property
    def end(self) -> TextSize:
        return TextSize(self._end)

    def as_tuple(self) -> tuple[int, int]:
        return (self._start, self._end)

    def __repr__(self) -> str:
        return f"TextRange({self._start}, {self._end})"


def slice_text_range(source: str, range: TextRange) -> str:
    return source[range.start.value : range.end.value]


def line_col(source: str, offset: TextSize) -> tuple[int, int]:
    """Convert an offset into a 1-based (line, column) pair.

    Columns count characters, so a tab counts as one column.
    """
    index = min(offset.value, len(source))
    line = source.count("\n", 0, index) + 1
    line_start = source.rfind("\n", 0, index) + 1
    return line, index - line_start + 1
