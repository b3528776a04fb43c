"""Typst formatter: whitespace normalization and argument list layout."""

from typstfmt.format.args import format_args
from typstfmt.format.context import FormatContext
from typstfmt.format.navigation import MalformedTreeError, is_last_comma, is_trailing_comma, next_is_ignoring
from typstfmt.format.options import FormatOptions, load_format_options
from typstfmt.format.runner import format_str, run_format
from typstfmt.format.visitor import format_default, format_tree, visit
from typstfmt.format.width import effective_line_length

__all__ = [
    "FormatContext",
    "FormatOptions",
    "MalformedTreeError",
    "effective_line_length",
    "format_args",
    "format_default",
    "format_str",
    "format_tree",
    "is_last_comma",
    "is_trailing_comma",
    "load_format_options",
    "next_is_ignoring",
    "run_format",
    "visit",
]
