import pytest

from tests._debug import debug_dump_cst, debug_dump_diagnostics
from tests._shared_cases import PARSER_CASES, TypstCase, case_id
from typstfmt.cst import GreenNode, GreenToken
from typstfmt.lexer import LexMode, Lexer
from typstfmt.parser import (
    ParseMode,
    Parser,
    ParseRecoveryTokenSet,
    RecoveryError,
    TokenSource,
    parse,
)
from typstfmt.syntax import SyntaxKind


def _collect_node_kinds(root: GreenNode) -> list[SyntaxKind]:
    kinds: list[SyntaxKind] = []

    def walk(node: GreenNode) -> None:
        kinds.append(node.kind)
        for child in node.children:
            if isinstance(child, GreenNode):
                walk(child)

    walk(root)
    return kinds


def _collect_tokens(root: GreenNode) -> list[GreenToken]:
    tokens: list[GreenToken] = []

    def walk(node: GreenNode) -> None:
        for child in node.children:
            if isinstance(child, GreenNode):
                walk(child)
            else:
                tokens.append(child)

    walk(root)
    return tokens


def _find_node(root: GreenNode, kind: SyntaxKind) -> GreenNode | None:
    for child in root.children:
        if isinstance(child, GreenNode):
            if child.kind == kind:
                return child
            found = _find_node(child, kind)
            if found is not None:
                return found
    return None


def _parse_ok(name: str, source: str, mode: ParseMode = ParseMode.MARKUP) -> GreenNode:
    parsed = parse(source, mode=mode)
    debug_dump_cst(name, source, parsed.root)
    debug_dump_diagnostics(name, parsed.diagnostics, source)
    assert parsed.diagnostics == []
    return parsed.root


@pytest.mark.parametrize("case", PARSER_CASES, ids=case_id)
def test_parse_is_lossless(case: TypstCase) -> None:
    parsed = parse(case.source)
    debug_dump_cst(case.name, case.source, parsed.root)
    debug_dump_diagnostics(case.name, parsed.diagnostics, case.source)

    assert parsed.root.kind == SyntaxKind.MARKUP
    assert parsed.root.text == case.source
    assert "".join(token.text for token in _collect_tokens(parsed.root)) == case.source
    assert (parsed.diagnostics == []) is case.parses_cleanly


def test_root_kind_follows_parse_mode() -> None:
    assert parse("a + b", mode=ParseMode.CODE).root.kind == SyntaxKind.CODE
    assert parse("x^2", mode=ParseMode.MATH).root.kind == SyntaxKind.MATH
    assert parse("text").root.kind == SyntaxKind.MARKUP


def test_markup_structure() -> None:
    root = _parse_ok("markup_structure", "= Title\nSome *bold* and _emph_ text.\n- item\n+ step\n")

    kinds = _collect_node_kinds(root)
    for kind in (
        SyntaxKind.HEADING,
        SyntaxKind.STRONG,
        SyntaxKind.EMPH,
        SyntaxKind.LIST_ITEM,
        SyntaxKind.ENUM_ITEM,
    ):
        assert kind in kinds


def test_heading_ends_at_line_break() -> None:
    root = _parse_ok("heading_line_end", "= Title\nbody")

    heading = _find_node(root, SyntaxKind.HEADING)
    assert heading is not None
    assert heading.text == "= Title"


def test_list_item_continues_on_indented_lines() -> None:
    root = _parse_ok("list_continuation", "- first\n  more\n- second\n")

    items = [child for child in root.children if isinstance(child, GreenNode) and child.kind == SyntaxKind.LIST_ITEM]
    assert [item.text for item in items] == ["- first\n  more", "- second"]


def test_stray_markers_become_text() -> None:
    root = _parse_ok("stray_markers", "a ] b")

    kinds = [token.kind for token in _collect_tokens(root)]
    assert SyntaxKind.RIGHT_BRACKET not in kinds
    assert SyntaxKind.TEXT in kinds


def test_embedded_call_builds_args_node() -> None:
    root = _parse_ok("embedded_call", "#f(a, b)")

    call = _find_node(root, SyntaxKind.FUNC_CALL)
    assert call is not None
    args = _find_node(call, SyntaxKind.ARGS)
    assert args is not None
    assert [child.kind for child in args.children] == [
        SyntaxKind.LEFT_PAREN,
        SyntaxKind.IDENT,
        SyntaxKind.COMMA,
        SyntaxKind.SPACE,
        SyntaxKind.IDENT,
        SyntaxKind.RIGHT_PAREN,
    ]


def test_args_include_trailing_content_blocks() -> None:
    root = _parse_ok("content_args", "#box(width: 1pt)[a][b]")

    args = _find_node(root, SyntaxKind.ARGS)
    assert args is not None
    kinds = [child.kind for child in args.children]
    assert kinds.count(SyntaxKind.CONTENT_BLOCK) == 2
    assert SyntaxKind.NAMED in kinds


def test_embedded_expression_stops_at_line_break() -> None:
    root = _parse_ok("embedded_line_end", "#let x = 1\nnext line")

    binding = _find_node(root, SyntaxKind.LET_BINDING)
    assert binding is not None
    assert binding.text == "let x = 1"
    assert root.children[-1].kind == SyntaxKind.TEXT


def test_embedded_expression_is_atomic() -> None:
    root = _parse_ok("embedded_atomic", "#x + 1")

    assert _find_node(root, SyntaxKind.BINARY) is None


def test_field_access_and_method_call() -> None:
    root = _parse_ok("field_access", "#it.body.at(0)")

    kinds = _collect_node_kinds(root)
    assert kinds.count(SyntaxKind.FIELD_ACCESS) == 2
    assert SyntaxKind.FUNC_CALL in kinds


def test_binary_precedence() -> None:
    root = _parse_ok("precedence", "1 + 2 * 3", mode=ParseMode.CODE)

    binary = _find_node(root, SyntaxKind.BINARY)
    assert binary is not None
    assert binary.text == "1 + 2 * 3"
    inner = _find_node(binary, SyntaxKind.BINARY)
    assert inner is not None
    assert inner.text == "2 * 3"


def test_assignment_is_right_associative() -> None:
    root = _parse_ok("assignment", "a = b = c", mode=ParseMode.CODE)

    outer = _find_node(root, SyntaxKind.BINARY)
    assert outer is not None
    inner = _find_node(outer, SyntaxKind.BINARY)
    assert inner is not None
    assert inner.text == "b = c"


def test_not_in_operator() -> None:
    root = _parse_ok("not_in", "a not in b", mode=ParseMode.CODE)

    binary = _find_node(root, SyntaxKind.BINARY)
    assert binary is not None
    assert [token.kind for token in _collect_tokens(binary) if token.kind != SyntaxKind.SPACE] == [
        SyntaxKind.IDENT,
        SyntaxKind.NOT,
        SyntaxKind.IN,
        SyntaxKind.IDENT,
    ]


def test_collections() -> None:
    assert _find_node(_parse_ok("parenthesized", "(1)", mode=ParseMode.CODE), SyntaxKind.PARENTHESIZED) is not None
    assert _find_node(_parse_ok("array_single", "(1,)", mode=ParseMode.CODE), SyntaxKind.ARRAY) is not None
    assert _find_node(_parse_ok("array", "(1, 2)", mode=ParseMode.CODE), SyntaxKind.ARRAY) is not None
    assert _find_node(_parse_ok("empty_dict", "(:)", mode=ParseMode.CODE), SyntaxKind.DICT) is not None
    dict_root = _parse_ok("dict", "(a: 1, ..rest)", mode=ParseMode.CODE)
    assert _find_node(dict_root, SyntaxKind.DICT) is not None
    assert _find_node(dict_root, SyntaxKind.NAMED) is not None
    assert _find_node(dict_root, SyntaxKind.SPREAD) is not None


def test_closures() -> None:
    root = _parse_ok("closure", "(a, b) => a + b", mode=ParseMode.CODE)
    closure = _find_node(root, SyntaxKind.CLOSURE)
    assert closure is not None
    assert _find_node(closure, SyntaxKind.PARAMS) is not None

    single = _parse_ok("single_param_closure", "x => x", mode=ParseMode.CODE)
    assert _find_node(single, SyntaxKind.CLOSURE) is not None


def test_let_closure_and_destructuring() -> None:
    closure_root = _parse_ok("let_closure", "#let f(x) = x")
    binding = _find_node(closure_root, SyntaxKind.LET_BINDING)
    assert binding is not None
    assert _find_node(binding, SyntaxKind.CLOSURE) is not None

    destructuring_root = _parse_ok("let_destructuring", "#let (a, b) = pair")
    assert _find_node(destructuring_root, SyntaxKind.DESTRUCTURING) is not None


def test_keyword_statements() -> None:
    source = "\n".join(
        (
            "#set text(size: 11pt) if true",
            "#show heading: set text(blue)",
            "#import \"lib.typ\": a, b as c",
            "#include \"chapter.typ\"",
            "#context here()",
        )
    )
    root = _parse_ok("keyword_statements", source)

    kinds = _collect_node_kinds(root)
    for kind in (
        SyntaxKind.SET_RULE,
        SyntaxKind.SHOW_RULE,
        SyntaxKind.MODULE_IMPORT,
        SyntaxKind.IMPORT_ITEMS,
        SyntaxKind.RENAMED_IMPORT_ITEM,
        SyntaxKind.MODULE_INCLUDE,
        SyntaxKind.CONTEXTUAL,
    ):
        assert kind in kinds


def test_control_flow_in_code_block() -> None:
    source = "#{\n  let n = 0\n  while n < 3 { n += 1 }\n  for x in (1, 2) { if x == 2 { break } else { continue } }\n  return n\n}"
    root = _parse_ok("control_flow", source)

    kinds = _collect_node_kinds(root)
    for kind in (
        SyntaxKind.CODE_BLOCK,
        SyntaxKind.WHILE_LOOP,
        SyntaxKind.FOR_LOOP,
        SyntaxKind.CONDITIONAL,
        SyntaxKind.LOOP_BREAK,
        SyntaxKind.LOOP_CONTINUE,
        SyntaxKind.FUNC_RETURN,
    ):
        assert kind in kinds


def test_else_on_next_line_continues_conditional() -> None:
    source = "#{\n  if a { 1 }\n  else { 2 }\n}"
    root = _parse_ok("else_next_line", source)

    conditional = _find_node(root, SyntaxKind.CONDITIONAL)
    assert conditional is not None
    assert conditional.text.endswith("else { 2 }")


def test_code_trivia_is_kept_as_sibling_tokens() -> None:
    root = _parse_ok("trivia_siblings", "#f(a, /* c */ b)")

    args = _find_node(root, SyntaxKind.ARGS)
    assert args is not None
    assert [child.kind for child in args.children] == [
        SyntaxKind.LEFT_PAREN,
        SyntaxKind.IDENT,
        SyntaxKind.COMMA,
        SyntaxKind.SPACE,
        SyntaxKind.BLOCK_COMMENT,
        SyntaxKind.SPACE,
        SyntaxKind.IDENT,
        SyntaxKind.RIGHT_PAREN,
    ]


def test_equation_contains_math_and_embedded_code() -> None:
    root = _parse_ok("equation", "$x + #f(1)$")

    equation = _find_node(root, SyntaxKind.EQUATION)
    assert equation is not None
    math = _find_node(equation, SyntaxKind.MATH)
    assert math is not None
    assert _find_node(math, SyntaxKind.FUNC_CALL) is not None


def test_unclosed_delimiter_is_reported() -> None:
    parsed = parse("#f(a, b")
    debug_dump_diagnostics("unclosed_delimiter", parsed.diagnostics)

    assert [diagnostic.code for diagnostic in parsed.diagnostics] == ["PARSER_UNCLOSED_DELIMITER"]
    assert parsed.root.text == "#f(a, b"


def test_statement_without_semicolon_or_line_break_is_reported() -> None:
    parsed = parse("#let x = 1 more")

    assert [diagnostic.code for diagnostic in parsed.diagnostics] == ["PARSER_EXPECTED_SEMICOLON_OR_LINE_BREAK"]


def test_hash_followed_by_space_is_reported() -> None:
    parsed = parse("# x")

    assert [diagnostic.code for diagnostic in parsed.diagnostics] == ["PARSER_EXPECTED_EXPRESSION"]
    assert parsed.root.text == "# x"


def test_invalid_code_is_recovered_into_error_node() -> None:
    parsed = parse("#{ , 1 }")

    assert parsed.diagnostics
    assert parsed.root.text == "#{ , 1 }"
    assert SyntaxKind.ERROR_NODE in _collect_node_kinds(parsed.root)


def test_recovery_token_set_stops_at_recovery_tokens() -> None:
    source = TokenSource(Lexer("x , y", mode=LexMode.CODE))
    parser = Parser(source)
    recovery = ParseRecoveryTokenSet(node_kind=SyntaxKind.ERROR_NODE, recovery_set=frozenset({SyntaxKind.COMMA}))

    completed, error = recovery.recover(parser)
    assert error is None
    assert completed is not None
    assert parser.at(SyntaxKind.COMMA)

    _, error = recovery.recover(parser)
    assert error == RecoveryError.ALREADY_RECOVERED
