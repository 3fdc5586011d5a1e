"""
Diagnostics for the Sinos front end.

Every failure the lexer or parser can report is a `SinosError`: an `ErrorKind`
plus the `Span` responsible. Parsing is fail-fast, so a parse either returns a
complete AST or raises exactly one of these.

`SinosError` subclasses `SyntaxError` so callers that already guard against bad
input with ``except SyntaxError`` keep working.
"""

from enum import Enum
from typing import Any

from sinos.sinos_source import Span


class ErrorKind(Enum):
    """All diagnostic kinds, valued by their canonical camelCase name."""

    # Lexical
    UNEXPECTED_CHAR = "unexpectedChar"
    UNTERMINATED_STRING = "unterminatedString"
    BAD_ESCAPE = "badEscape"
    BAD_NUMBER = "badNumber"

    # Syntactic
    EQ_CHAIN = "eqChain"
    CMP_CHAIN = "cmpChain"
    EXPECT_SEMI = "expectSemi"
    EXPECT_EXPR = "expectExpr"
    EXPECT_PAREN_CLOSE = "expectParenClose"
    EXPECT_NAME = "expectName"
    EXPECT_EQUAL = "expectEqual"
    EXPECT_BRACE_CLOSE = "expectBraceClose"
    TOO_DEEP = "tooDeep"

    def __str__(self) -> str:
        return self.value


MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.UNEXPECTED_CHAR: "unexpected character",
    ErrorKind.UNTERMINATED_STRING: "unterminated string literal",
    ErrorKind.BAD_ESCAPE: "unknown escape sequence in string literal",
    ErrorKind.BAD_NUMBER: "malformed number literal",
    ErrorKind.EQ_CHAIN: "equality operators cannot be chained; use parentheses",
    ErrorKind.CMP_CHAIN: "comparison operators cannot be chained; use parentheses",
    ErrorKind.EXPECT_SEMI: "expected ';'",
    ErrorKind.EXPECT_EXPR: "expected an expression",
    ErrorKind.EXPECT_PAREN_CLOSE: "expected ')'",
    ErrorKind.EXPECT_NAME: "expected a name",
    ErrorKind.EXPECT_EQUAL: "expected '='",
    ErrorKind.EXPECT_BRACE_CLOSE: "expected '}'",
    ErrorKind.TOO_DEEP: "expression nested too deeply",
}


class SinosError(SyntaxError):
    """A single position-tagged diagnostic.

    Two diagnostics are equal when they have the same kind and the same span.

    Attributes:
        kind (ErrorKind): What went wrong.
        span (Span): The source range responsible.
    """

    def __init__(self, kind: ErrorKind, span: Span) -> None:
        super().__init__(f"{kind}: {MESSAGES[kind]} at {span!r}")
        self.kind = kind
        self.span = span

    @property
    def message(self) -> str:
        return MESSAGES[self.kind]

    def __repr__(self) -> str:
        return f"SinosError({self.kind.value}, {self.span!r})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, SinosError)
            and self.kind == other.kind
            and self.span == other.span
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.span))

    def render(self) -> str:
        """Formats the diagnostic with a caret line under the offending source.

        Returns:
            str: ``name:line:col: error: message`` followed by the source line and carets.
        """
        source = self.span.source
        line, col = source.line_col(self.span.index)
        line_text = source.line_text(line)
        width = max(1, min(self.span.length, len(line_text) - col + 1))
        caret = " " * (col - 1) + "^" * width
        return (
            f"{source.name}:{line}:{col}: error: {self.message}\n{line_text}\n{caret}"
        )


__all__ = ["MESSAGES", "ErrorKind", "SinosError"]
