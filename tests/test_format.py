import pytest

from tests._debug import debug_dump_formatted, debug_print_source
from tests._shared_cases import FORMAT_CASES, FormatCase, case_id
from typstfmt import FormatOptions, format_str
from typstfmt.format import run_format


@pytest.mark.parametrize("case", FORMAT_CASES, ids=case_id)
def test_format_cases(case: FormatCase) -> None:
    debug_print_source(case.name, case.source)
    options = FormatOptions(indent_width=case.indent_width, max_line_length=case.max_line_length)

    formatted = format_str(case.source, options)
    debug_dump_formatted(case.name, case.source, formatted)

    assert formatted == case.expected


@pytest.mark.parametrize("case", FORMAT_CASES, ids=case_id)
def test_formatting_is_idempotent(case: FormatCase) -> None:
    options = FormatOptions(indent_width=case.indent_width, max_line_length=case.max_line_length)

    assert format_str(case.expected, options) == case.expected


def test_no_runs_of_three_newlines() -> None:
    source = "first\n\n\n\n\nsecond\n\n\n\nthird"

    formatted = format_str(source)

    assert "\n\n\n" not in formatted
    assert formatted == "first\n\nsecond\n\nthird"


def test_no_double_spaces_in_markup_text() -> None:
    formatted = format_str("Some   *bold*    and  _emph_ text")

    assert formatted == "Some *bold* and _emph_ text"


def test_line_breaks_are_kept() -> None:
    source = "- first\n  continued\n- second"

    assert format_str(source) == source


def test_heading_and_paragraphs() -> None:
    source = "=  Title\n\n\nBody   text"

    assert format_str(source) == "= Title\n\nBody text"


def test_source_with_syntax_errors_is_returned_unchanged() -> None:
    source = "#f(a,   b"

    result = run_format(source)

    assert result.formatted_text == source
    assert result.changed is False
    assert result.diagnostics


def test_changed_flag() -> None:
    assert run_format("a  b").changed is True
    assert run_format("a b").changed is False


def test_empty_source() -> None:
    assert format_str("") == ""


def test_nested_call_inside_content_block() -> None:
    source = "#box[#f(a,b)]"

    assert format_str(source) == "#box[#f(a, b)]"


def test_line_comment_in_call_keeps_arguments_out_of_comment() -> None:
    formatted = format_str("#f(a, // c\n  b)")

    assert formatted == "#f(\n  a, // c\n  b,\n)"
    assert format_str(formatted) == formatted


def test_block_comment_in_call() -> None:
    assert format_str("#f(a,   /* c */   b)") == "#f(a, /* c */ b)"


def test_blank_line_between_code_statements_is_kept() -> None:
    source = "#{\n  let a = 1\n\n  let b = 2\n}"

    assert format_str(source) == source


def test_blank_lines_between_code_statements_are_capped() -> None:
    formatted = format_str("#{\n  let a = 1\n\n\n\n\n  let b = 2\n}")

    assert formatted == "#{\n  let a = 1\n\n  let b = 2\n}"
