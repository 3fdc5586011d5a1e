"""
Lexical analyzer for the Sinos programming language.

This module provides core components for converting raw source code into token streams:

Classes:
    CharacterStream: Stream abstraction for reading characters out of a SourceFile.
    Token: Represents a single token with type, value, and source span.
    Lexer: Converts a CharacterStream into a lazily produced sequence of tokens.

Features:
    - Skips whitespace and single-line comments (`//`)
    - Supports longest-match recognition of operators
    - Recognizes:
        * Identifiers and keywords (`let`, `true`, `false`)
        * Numbers (integer and float)
        * Strings (with escape sequences, decoded while scanning)
        * Operators and punctuation
    - After the end of input, keeps returning a zero-length EOF token

Raises:
    SinosError: On unexpected characters, unterminated strings, unknown escapes
    and malformed numbers.

Example:
    >>> lexer = Lexer(CharacterStream(SourceFile("<test>", "let x")))
    >>> lexer.next_token()
    Token(LET, let)

Exports:
    - CharacterStream
    - Token
    - Lexer
    - tokenize
    - token_hashmap
"""

import math
from collections.abc import Iterator
from dataclasses import dataclass

from sinos.sinos_constants import (
    COMMENT_PREFIX,
    ESCAPES,
    MAX_SYMBOL_LENGTH,
    symbol_tokens,
    token_hashmap,
)
from sinos.sinos_errors import ErrorKind, SinosError
from sinos.sinos_source import SourceFile, Span


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def is_ident_part(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class CharacterStream:
    """
    A utility for reading characters from a SourceFile by offset.

    Attributes:
        source (SourceFile): The input source buffer.
        position (int): Current offset in the source.
    """

    def __init__(self, source: SourceFile, position: int = 0):
        self.source = source
        self.position = position

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            Exception: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise Exception(
                f"CharacterStreamError: Attempted to read past end of source at position=<{self.position}>"
            )
        char = self.source[self.position]
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """
        Returns the character at the given offset from the current position without advancing.

        Returns:
            str: The character at the offset, or an empty string if out of bounds.
        """
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def startswith(self, prefix: str) -> bool:
        return self.source.text.startswith(prefix, self.position)

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)

    def span_from(self, start: int) -> Span:
        """Returns the span from `start` up to the current position."""
        return Span(self.source, start, self.position - start)


@dataclass(frozen=True, repr=False)
class Token:
    """Represents a single lexical token in the Sinos language.

    Tokens are produced once by the lexer and cannot be mutated afterwards.

    Attributes:
        type (str): The canonical token type (e.g. 'IDENT', 'INT', 'EOF').
        value (str): Raw text for names, numbers, booleans and symbols;
            decoded content for strings; empty for EOF.
        span (Span): Where the token sits in the source.
    """

    type: str
    value: str
    span: Span

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"


class Lexer:
    """Lexical analyzer for the Sinos language.

    The Lexer pulls characters from a CharacterStream and hands out one Token per
    `next_token` call. Iterating a Lexer yields every token up to and including
    the first EOF.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream

    @property
    def source(self) -> SourceFile:
        return self.stream.source

    def peek(self, offset: int = 0) -> str:
        return self.stream.peek(offset)

    def advance(self) -> str:
        return self.stream.next()

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            yield tok
            if tok.type == "EOF":
                return

    def error(self, kind: ErrorKind, start: int, length: int | None = None) -> SinosError:
        """Builds a diagnostic covering `start` to the current position (or `length` chars)."""
        if length is None:
            return SinosError(kind, self.stream.span_from(start))
        return SinosError(kind, Span(self.source, start, length))

    def skip_whitespace(self) -> None:
        """Skips all whitespace and comments in the stream."""
        while not self.stream.end_of_file():
            if self.peek().isspace():
                self.advance()
            elif self.stream.startswith(COMMENT_PREFIX):
                self.skip_comment()
            else:
                break

    def skip_comment(self) -> None:
        """Advances through the stream until the end of a comment line."""
        while not self.stream.end_of_file() and self.peek() != "\n":
            self.advance()

    def match_operator(self) -> Token | None:
        """Attempts to match the longest valid operator from the current position.

        Returns:
            Token | None: A Token if a match is found, otherwise None.
        """
        start = self.stream.position
        max_token = None
        candidate = ""

        for i in range(MAX_SYMBOL_LENGTH):
            ch = self.peek(i)
            if ch == "":
                break
            candidate += ch
            if candidate in symbol_tokens:
                max_token = candidate

        if max_token:
            for _ in range(len(max_token)):
                self.advance()
            return Token(symbol_tokens[max_token], max_token, self.stream.span_from(start))

        return None

    def scan_identifier(self) -> Token:
        start = self.stream.position
        while not self.stream.end_of_file() and is_ident_part(self.peek()):
            self.advance()
        span = self.stream.span_from(start)
        ident = span.text
        if ident in token_hashmap:
            return Token(token_hashmap[ident], ident, span)
        return Token("IDENT", ident, span)

    def scan_number(self) -> Token:
        """Scans an integer (`123`) or float (`1.5`) literal.

        Raises:
            SinosError: `badNumber` for a dangling or repeated decimal point, a float
                too large to represent, or an integer too long to convert.
        """
        start = self.stream.position
        while is_digit(self.peek()):
            self.advance()

        if self.peek() != ".":
            span = self.stream.span_from(start)
            try:
                int(span.text)
            except ValueError:
                # Longer than the interpreter's int string-conversion limit.
                raise SinosError(ErrorKind.BAD_NUMBER, span) from None
            return Token("INT", span.text, span)

        self.advance()  # '.'
        if not is_digit(self.peek()):
            raise self.error(ErrorKind.BAD_NUMBER, start)
        while is_digit(self.peek()):
            self.advance()

        if self.peek() == ".":
            while is_digit(self.peek()) or self.peek() == ".":
                self.advance()
            raise self.error(ErrorKind.BAD_NUMBER, start)

        span = self.stream.span_from(start)
        if math.isinf(float(span.text)):
            raise SinosError(ErrorKind.BAD_NUMBER, span)
        return Token("FLOAT", span.text, span)

    def scan_string(self) -> Token:
        """Scans a double-quoted string literal, decoding escapes as it goes.

        Raises:
            SinosError: `unterminatedString` if input ends before the closing quote,
                `badEscape` for an unknown escape letter.
        """
        start = self.stream.position
        self.advance()  # opening quote
        chars: list[str] = []
        while not self.stream.end_of_file():
            ch = self.advance()
            if ch == '"':
                return Token("STRING", "".join(chars), self.stream.span_from(start))
            if ch == "\\":
                if self.stream.end_of_file():
                    break
                esc = self.advance()
                if esc not in ESCAPES:
                    raise self.error(
                        ErrorKind.BAD_ESCAPE, self.stream.position - 2, 2
                    )
                chars.append(ESCAPES[esc])
            else:
                chars.append(ch)
        raise self.error(ErrorKind.UNTERMINATED_STRING, start)

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token; a zero-length EOF token once input is exhausted.

        Raises:
            SinosError: If a malformed or unrecognized token is encountered.
        """
        self.skip_whitespace()

        start = self.stream.position
        if self.stream.end_of_file():
            return Token("EOF", "", self.stream.span_from(start))

        ch = self.peek()

        # 1. Identifier or keyword
        if is_ident_start(ch):
            return self.scan_identifier()

        # 2. Number or float
        if is_digit(ch):
            return self.scan_number()

        # 3. String
        if ch == '"':
            return self.scan_string()

        # 4. Compound or symbolic operator
        token = self.match_operator()
        if token:
            return token

        # 5. Unknown character
        self.advance()
        raise self.error(ErrorKind.UNEXPECTED_CHAR, start)


def tokenize(text: str, name: str = "<input>") -> list[Token]:
    """Tokenizes a whole string, returning every token including the final EOF."""
    return list(Lexer(CharacterStream(SourceFile(name, text))))


__all__ = ["CharacterStream", "Lexer", "Token", "token_hashmap", "tokenize"]
