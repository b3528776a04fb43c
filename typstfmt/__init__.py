"""Formatter for Typst markup and code."""

from typstfmt.format import FormatOptions, format_str, load_format_options
from typstfmt.parser import ParseMode
from typstfmt.pipeline import run_check, run_format

__all__ = [
    "FormatOptions",
    "ParseMode",
    "format_str",
    "load_format_options",
    "run_check",
    "run_format",
]
