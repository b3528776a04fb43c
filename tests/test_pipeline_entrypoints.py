import pytest

from typstfmt.parser import ParseMode, parse_result
from typstfmt.pipeline import run_check, run_format


def test_run_format_reuses_provided_parse_result() -> None:
    source = "#f(a,b)"
    parsed = parse_result(source)

    result = run_format("ignored", parse=parsed)

    assert result.parse is parsed
    assert result.formatted_text == "#f(a, b)"
    assert result.changed is True


def test_run_format_rejects_parse_with_mode() -> None:
    parsed = parse_result("a")

    with pytest.raises(ValueError, match="Pass either parse or mode, not both"):
        run_format("a", parse=parsed, mode=ParseMode.CODE)


def test_run_format_in_code_mode() -> None:
    result = run_format("f(a,b)", mode=ParseMode.CODE)

    assert result.parse.mode == ParseMode.CODE
    assert result.formatted_text == "f(a, b)"
    assert result.diagnostics == []


def test_run_check_on_formatted_source() -> None:
    result = run_check("#f(a, b)")

    assert result.has_errors is False
    assert result.is_formatted is True
    assert result.diagnostics == []


def test_run_check_on_unformatted_source() -> None:
    result = run_check("a   b")

    assert result.has_errors is False
    assert result.is_formatted is False


def test_run_check_reports_parse_errors() -> None:
    source = "#f(a"

    result = run_check(source)

    assert result.parse.source_text == source
    assert result.has_errors is True
    assert result.is_formatted is False
    assert result.diagnostics[0].code == "PARSER_UNCLOSED_DELIMITER"


def test_run_check_reuses_provided_parse_result() -> None:
    parsed = parse_result("a b")

    result = run_check("ignored", parse=parsed)

    assert result.parse is parsed
    assert result.is_formatted is True
