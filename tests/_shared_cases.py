"""Centralized Typst source cases used across lexer/parser/format tests."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TypstCase:
    name: str
    source: str
    parses_cleanly: bool = True


@dataclass(frozen=True, slots=True)
class FormatCase:
    name: str
    source: str
    expected: str
    indent_width: int = 2
    max_line_length: int = 80


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


PARSER_CASES: tuple[TypstCase, ...] = (
    TypstCase(name="empty", source=""),
    TypstCase(name="plain_text", source="Hello world.\n"),
    TypstCase(name="strong_and_emph", source="Some *bold* and _italic_ text.\n"),
    TypstCase(
        name="heading_and_paragraphs",
        source=_dedent(
            """
            = Introduction
            First paragraph.


            Second paragraph.
            """
        ),
    ),
    TypstCase(
        name="lists",
        source=_dedent(
            """
            - first
            - second
              continued
            + numbered
            12. explicit
            / Term: description
            """
        ),
    ),
    TypstCase(name="let_binding", source="#let ident = variable;\n"),
    TypstCase(name="let_closure", source="#let add(a, b) = a + b\n"),
    TypstCase(name="set_rule", source='#set text(font: "Linux Libertine", size: 11pt)\n'),
    TypstCase(name="show_rule", source="#show heading: it => emph(it.body)\n"),
    TypstCase(name="call_with_content", source="#figure(image(\"a.png\"), caption: [A *cat*.])\n"),
    TypstCase(name="trailing_content_block", source="#align(center)[Centered]\n"),
    TypstCase(
        name="code_block",
        source=_dedent(
            """
            #{
              let x = 1 // one
              if x > 0 { "pos" } else { "neg" }
              for (k, v) in (a: 1, b: 2) { k }
            }
            """
        ),
    ),
    TypstCase(name="equation", source="Inline $x^2 + #f(1)$ math.\n"),
    TypstCase(name="reference_and_label", source="See @intro and <intro>.\n"),
    TypstCase(name="link_and_raw", source="Visit https://typst.app or run `typst compile`.\n"),
    TypstCase(name="import", source='#import "util.typ": a, b as c\n'),
    TypstCase(name="comments", source="Text // line comment\n/* block /* nested */ comment */\n"),
    TypstCase(name="unclosed_call", source="#f(a, b\n", parses_cleanly=False),
    TypstCase(name="unterminated_string", source='#let s = "abc\n', parses_cleanly=False),
    TypstCase(name="missing_expression", source="# after hash\n", parses_cleanly=False),
)


FORMAT_CASES: tuple[FormatCase, ...] = (
    FormatCase(name="single_space_unchanged", source=" ", expected=" "),
    FormatCase(name="two_spaces_collapse", source="  ", expected=" "),
    FormatCase(name="three_spaces_collapse", source="   ", expected=" "),
    FormatCase(name="newline_runs_capped", source="\n\n\n", expected="\n\n"),
    FormatCase(name="let_unchanged", source="#let ident = variable", expected="#let ident = variable"),
    FormatCase(name="let_semicolon_unchanged", source="#let ident = variable;", expected="#let ident = variable;"),
    FormatCase(name="let_no_spacing_unchanged", source="#let ident=variable", expected="#let ident=variable"),
    FormatCase(
        name="call_breaks_past_limit",
        source="#f(aaaaaaaaaa, bbbbbbbbbb)",
        expected="#f(\n  aaaaaaaaaa,\n  bbbbbbbbbb,\n)",
        max_line_length=20,
    ),
    FormatCase(name="call_spacing_normalized", source="#f(a,b ,  c)", expected="#f(a, b, c)"),
    FormatCase(name="call_trailing_comma_dropped", source="#f(a, b,)", expected="#f(a, b)"),
    FormatCase(name="text_spaces_collapse", source="a    b", expected="a b"),
    FormatCase(
        name="code_block_blank_line_kept",
        source="#{\n  let a = 1\n\n  let b = 2\n}",
        expected="#{\n  let a = 1\n\n  let b = 2\n}",
    ),
    FormatCase(
        name="code_block_blank_lines_capped",
        source="#{\n  let a = 1\n\n\n\n  let b = 2\n}",
        expected="#{\n  let a = 1\n\n  let b = 2\n}",
    ),
    FormatCase(
        name="call_line_comment_breaks",
        source="#f(a, // c\n  b)",
        expected="#f(\n  a, // c\n  b,\n)",
    ),
    FormatCase(name="call_block_comment_spaced", source="#f(a, /* c */ b)", expected="#f(a, /* c */ b)"),
)


def case_id(case: TypstCase | FormatCase) -> str:
    return case.name
