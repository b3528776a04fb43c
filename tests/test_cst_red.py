from typstfmt.cst import SyntaxNode, SyntaxToken, dump_tree, from_green
from typstfmt.parser import parse
from typstfmt.syntax import SyntaxKind


def _red_root(source: str) -> SyntaxNode:
    parsed = parse(source)
    return from_green(parsed.root, source)


def test_red_wrappers_navigation_and_siblings() -> None:
    root = _red_root("#f(a, b)")

    args = root.find_first(SyntaxKind.ARGS)
    assert args is not None
    assert args.parent is not None
    assert args.parent.kind == SyntaxKind.FUNC_CALL

    first, second = (child for child in args.children if child.kind == SyntaxKind.IDENT)
    assert first.next_sibling() is args.children[2]
    assert second.prev_sibling() is args.children[3]
    assert args.children[0].prev_sibling() is None
    assert args.children[-1].next_sibling() is None


def test_red_offsets_match_source() -> None:
    source = "= Title\n#let x = (1, 2)"
    root = _red_root(source)

    for token in root.descendants_tokens():
        assert source[token.start : token.end] == token.text

    binding = root.find_first(SyntaxKind.LET_BINDING)
    assert binding is not None
    assert binding.text == source[binding.start : binding.end]
    assert binding.text == "let x = (1, 2)"


def test_child_nodes_and_tokens_partition_children() -> None:
    root = _red_root("Some *bold* text")

    assert len(root.child_nodes()) + len(root.child_tokens()) == len(root.children)
    assert all(isinstance(node, SyntaxNode) for node in root.child_nodes())
    assert all(isinstance(token, SyntaxToken) for token in root.child_tokens())
    assert root.find_first(SyntaxKind.STRONG) is not None


def test_dump_tree_lists_kinds_by_depth() -> None:
    dumped = dump_tree(_red_root("*a*"))

    assert dumped.splitlines() == [
        "MARKUP",
        "  STRONG",
        "    STAR '*'",
        "    MARKUP",
        "      TEXT 'a'",
        "    STAR '*'",
    ]
