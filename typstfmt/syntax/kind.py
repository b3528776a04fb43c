"""Unified syntax kinds for lexer, parser and CST."""

from enum import IntEnum


class SyntaxKind(IntEnum):
    """Typst syntax vocabulary (tokens + nodes)."""

    TOMBSTONE = 0
    EOF = 1
    # Virtual token reported by the parser when a line break ends code.
    END = 2
    ERROR = 3

    # Trivia in code and math, content in markup
    SPACE = 10
    PARBREAK = 11
    LINE_COMMENT = 12
    BLOCK_COMMENT = 13

    # Markup tokens
    TEXT = 20
    ESCAPE = 21
    LINEBREAK = 22
    SHORTHAND = 23
    SMART_QUOTE = 24
    RAW = 25
    LINK = 26
    LABEL = 27
    REF_MARKER = 28
    HEADING_MARKER = 29
    LIST_MARKER = 30
    ENUM_MARKER = 31
    TERM_MARKER = 32
    HASH = 33
    MATH_TEXT = 34

    # Delimiters
    LEFT_BRACE = 40
    RIGHT_BRACE = 41
    LEFT_BRACKET = 42
    RIGHT_BRACKET = 43
    LEFT_PAREN = 44
    RIGHT_PAREN = 45
    DOLLAR = 46

    # Punctuation and operators
    COMMA = 50
    SEMICOLON = 51
    COLON = 52
    DOT = 53
    DOTS = 54
    STAR = 55
    UNDERSCORE = 56
    PLUS = 57
    MINUS = 58
    SLASH = 59
    EQ = 60
    EQ_EQ = 61
    EXCL_EQ = 62
    LT = 63
    LT_EQ = 64
    GT = 65
    GT_EQ = 66
    PLUS_EQ = 67
    HYPH_EQ = 68
    STAR_EQ = 69
    SLASH_EQ = 70
    ARROW = 71

    # Keywords
    NONE = 80
    AUTO = 81
    BOOL = 82
    LET = 83
    SET = 84
    SHOW = 85
    CONTEXT = 86
    IF = 87
    ELSE = 88
    FOR = 89
    IN = 90
    WHILE = 91
    BREAK = 92
    CONTINUE = 93
    RETURN = 94
    IMPORT = 95
    INCLUDE = 96
    AS = 97
    NOT = 98
    AND = 99
    OR = 100

    # Literals
    IDENT = 110
    INT = 111
    FLOAT = 112
    NUMERIC = 113
    STR = 114

    # Node kinds
    MARKUP = 1000
    STRONG = 1001
    EMPH = 1002
    HEADING = 1003
    LIST_ITEM = 1004
    ENUM_ITEM = 1005
    TERM_ITEM = 1006
    REF = 1007
    EQUATION = 1008
    MATH = 1009
    CODE = 1010
    CODE_BLOCK = 1011
    CONTENT_BLOCK = 1012
    PARENTHESIZED = 1013
    ARRAY = 1014
    DICT = 1015
    NAMED = 1016
    KEYED = 1017
    SPREAD = 1018
    UNARY = 1019
    BINARY = 1020
    FIELD_ACCESS = 1021
    FUNC_CALL = 1022
    ARGS = 1023
    CLOSURE = 1024
    PARAMS = 1025
    DESTRUCTURING = 1026
    LET_BINDING = 1027
    SET_RULE = 1028
    SHOW_RULE = 1029
    CONDITIONAL = 1030
    WHILE_LOOP = 1031
    FOR_LOOP = 1032
    MODULE_IMPORT = 1033
    IMPORT_ITEMS = 1034
    RENAMED_IMPORT_ITEM = 1035
    MODULE_INCLUDE = 1036
    LOOP_BREAK = 1037
    LOOP_CONTINUE = 1038
    FUNC_RETURN = 1039
    CONTEXTUAL = 1040
    ERROR_NODE = 1041

    @property
    def is_trivia(self) -> bool:
        """Whether the kind is skipped by the parser outside of markup."""
        return self in (
            SyntaxKind.SPACE,
            SyntaxKind.PARBREAK,
            SyntaxKind.LINE_COMMENT,
            SyntaxKind.BLOCK_COMMENT,
        )

    @property
    def is_terminator(self) -> bool:
        """Whether the kind closes a structural list."""
        return self in (
            SyntaxKind.END,
            SyntaxKind.SEMICOLON,
            SyntaxKind.RIGHT_BRACE,
            SyntaxKind.RIGHT_PAREN,
            SyntaxKind.RIGHT_BRACKET,
        )

    @property
    def is_keyword(self) -> bool:
        return SyntaxKind.NONE.value <= self.value <= SyntaxKind.OR.value

    @property
    def is_token(self) -> bool:
        return self != SyntaxKind.TOMBSTONE and self.value < SyntaxKind.MARKUP.value

    @property
    def is_node(self) -> bool:
        return self.value >= SyntaxKind.MARKUP.value


KEYWORDS: dict[str, SyntaxKind] = {
    "none": SyntaxKind.NONE,
    "auto": SyntaxKind.AUTO,
    "true": SyntaxKind.BOOL,
    "false": SyntaxKind.BOOL,
    "let": SyntaxKind.LET,
    "set": SyntaxKind.SET,
    "show": SyntaxKind.SHOW,
    "context": SyntaxKind.CONTEXT,
    "if": SyntaxKind.IF,
    "else": SyntaxKind.ELSE,
    "for": SyntaxKind.FOR,
    "in": SyntaxKind.IN,
    "while": SyntaxKind.WHILE,
    "break": SyntaxKind.BREAK,
    "continue": SyntaxKind.CONTINUE,
    "return": SyntaxKind.RETURN,
    "import": SyntaxKind.IMPORT,
    "include": SyntaxKind.INCLUDE,
    "as": SyntaxKind.AS,
    "not": SyntaxKind.NOT,
    "and": SyntaxKind.AND,
    "or": SyntaxKind.OR,
}
