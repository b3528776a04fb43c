from structlog.testing import capture_logs

from typstfmt.format import FormatContext, FormatOptions


def _context(indent_width: int = 2) -> FormatContext:
    return FormatContext.from_options(FormatOptions(indent_width=indent_width))


def test_repeated_spaces_are_suppressed() -> None:
    ctx = _context()

    assert ctx.process(" ") == " "
    assert ctx.spacing is True
    assert ctx.process(" ") == ""
    assert ctx.process(" ") == ""


def test_newlines_are_capped_at_two() -> None:
    ctx = _context()

    emitted = "".join(ctx.process("\n") for _ in range(5))

    assert emitted == "\n\n"
    assert ctx.newline_run == 2


def test_other_text_resets_state() -> None:
    ctx = _context()
    ctx.process(" ")
    ctx.process("\n")

    assert ctx.process("word") == "word"
    assert ctx.spacing is False
    assert ctx.newline_run == 0
    assert ctx.process(" ") == " "


def test_pushed_raw_resets_state() -> None:
    ctx = _context()
    ctx.process("\n")
    ctx.process("\n")

    ctx.pushed_raw()

    assert ctx.process("\n") == "\n"


def test_indent_uses_indent_width() -> None:
    assert _context(indent_width=4).indent == "    "
    assert _context(indent_width=1).indent == " "


def test_suppressed_tokens_are_logged_at_debug_level() -> None:
    ctx = _context()

    with capture_logs() as logs:
        ctx.process(" ")
        ctx.process(" ")

    assert [(entry["event"], entry["log_level"]) for entry in logs] == [("Suppressed space", "debug")]
