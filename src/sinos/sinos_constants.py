"""
Token tables for the Sinos language.

`token_hashmap` maps every keyword and symbol spelling to its canonical token type.
The lexer uses it for longest-match operator recognition and keyword lookup; the
parser groups `operator_tokens` into precedence levels.
"""

token_hashmap: dict[str, str] = {
    # Keywords
    "let": "LET",
    "true": "BOOL",
    "false": "BOOL",
    # Punctuation
    "(": "LPAREN",
    ")": "RPAREN",
    "{": "LBRACE",
    "}": "RBRACE",
    ",": "COMMA",
    ":": "COLON",
    ";": "SEMI",
    "=": "ASSIGN",
    # Operators
    "==": "EQ",
    "!=": "NE",
    "<": "LT",
    "<=": "LE",
    ">": "GT",
    ">=": "GE",
    "!": "NOT",
    "+": "PLUS",
    "-": "SUB",
    "*": "MULT",
    "/": "DIV",
    "%": "MOD",
    "~": "CAT",
}

keyword_tokens: set[str] = {k for k in token_hashmap if k.isalpha()}

symbol_tokens: dict[str, str] = {
    k: v for k, v in token_hashmap.items() if k not in keyword_tokens
}

MAX_SYMBOL_LENGTH = max(len(k) for k in symbol_tokens)

# Indexed by the parser; order matters.
operator_tokens: list[str] = [
    "EQ",
    "NE",
    "LT",
    "LE",
    "GT",
    "GE",
    "CAT",
    "PLUS",
    "SUB",
    "MULT",
    "DIV",
    "MOD",
    "NOT",
]

# Escape letter -> decoded character inside string literals.
ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "0": "\0",
    "\\": "\\",
    '"': '"',
}

COMMENT_PREFIX = "//"

# Parser limits: open brackets at once, and height of any parsed tree.
MAX_NESTING_DEPTH = 40
MAX_TREE_HEIGHT = 256

__all__ = [
    "COMMENT_PREFIX",
    "ESCAPES",
    "MAX_NESTING_DEPTH",
    "MAX_SYMBOL_LENGTH",
    "MAX_TREE_HEIGHT",
    "keyword_tokens",
    "operator_tokens",
    "symbol_tokens",
    "token_hashmap",
]
