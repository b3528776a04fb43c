from typstfmt.parser import ParseMode, parse, parse_result
from typstfmt.syntax import SyntaxKind


def test_parse_result_exposes_green_diagnostics_and_error_state() -> None:
    result = parse_result("Hello *world*\n")

    assert result.green_root() is result.parsed.root
    assert result.diagnostics == []
    assert result.has_errors is False
    assert result.mode == ParseMode.MARKUP


def test_parse_result_caches_syntax_root() -> None:
    result = parse_result("#f(a)\n")

    first_syntax = result.syntax_root()
    second_syntax = result.syntax_root()
    assert first_syntax is second_syntax
    assert first_syntax.text == "#f(a)\n"


def test_parse_result_reports_errors() -> None:
    result = parse_result("#f(a\n")

    assert result.has_errors is True
    assert result.diagnostics == result.parsed.diagnostics


def test_parse_result_matches_parse_contract() -> None:
    source = "let x = 1"

    result = parse_result(source, mode=ParseMode.CODE)
    parsed = parse(source, mode=ParseMode.CODE)

    assert result.green_root() == parsed.root
    assert result.green_root().kind == SyntaxKind.CODE
    assert result.diagnostics == parsed.diagnostics
