"""
Source buffers and spans for the Sinos front end.

Classes:
    SourceFile: Owns a named piece of source text and gives indexed character access.
    Span: A half-open ``[index, index + length)`` range over one SourceFile.

Spans are the only position information the lexer and parser attach to tokens,
AST nodes and diagnostics. Line/column numbers are derived on demand by
`SourceFile.line_col` when a diagnostic is rendered.

Example:
    >>> src = SourceFile("<test>", "let x = 1;")
    >>> Span(src, 4, 1).text
    'x'
"""

from typing import Any


class SourceFile:
    """A named source buffer.

    Attributes:
        name (str): Display name used in diagnostics (a path or ``<input>``).
        text (str): The complete source text.
    """

    def __init__(self, name: str, text: str) -> None:
        self.name = name
        self.text = text

    def __len__(self) -> int:
        return len(self.text)

    def __getitem__(self, index: int) -> str:
        return self.text[index]

    def __repr__(self) -> str:
        return f"SourceFile({self.name!r}, <{len(self.text)} chars>)"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, SourceFile)
            and self.name == other.name
            and self.text == other.text
        )

    def __hash__(self) -> int:
        return hash((self.name, self.text))

    def line_col(self, index: int) -> tuple[int, int]:
        """Returns the 1-based ``(line, column)`` of a character offset.

        Args:
            index (int): Offset into the text; ``len(text)`` is allowed (end of input).

        Returns:
            tuple[int, int]: Line and column, both starting at 1.
        """
        line = self.text.count("\n", 0, index) + 1
        line_start = self.text.rfind("\n", 0, index) + 1
        return line, index - line_start + 1

    def line_text(self, line: int) -> str:
        """Returns the text of a 1-based line, without its newline."""
        lines = self.text.split("\n")
        if 1 <= line <= len(lines):
            return lines[line - 1]
        return ""


class Span:
    """A half-open range of characters in a SourceFile.

    Attributes:
        source (SourceFile): The buffer the span points into.
        index (int): Offset of the first character.
        length (int): Number of characters covered; zero marks a position.

    Raises:
        ValueError: If the range does not fit inside the source.
    """

    def __init__(self, source: SourceFile, index: int, length: int) -> None:
        if index < 0 or length < 0 or index + length > len(source):
            raise ValueError(
                f"Span<{index},{length}> out of range for source of length {len(source)}"
            )
        self.source = source
        self.index = index
        self.length = length

    @property
    def end(self) -> int:
        return self.index + self.length

    @property
    def text(self) -> str:
        return self.source.text[self.index : self.end]

    def to(self, other: "Span") -> "Span":
        """Returns the span running from the start of this span to the end of `other`."""
        return Span(self.source, self.index, other.end - self.index)

    def contains(self, other: "Span") -> bool:
        return self.index <= other.index and other.end <= self.end

    def __repr__(self) -> str:
        return f"Span<{self.index},{self.length}>"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Span)
            and self.index == other.index
            and self.length == other.length
            and self.source == other.source
        )

    def __hash__(self) -> int:
        return hash((self.index, self.length, self.source.name))


__all__ = ["SourceFile", "Span"]
