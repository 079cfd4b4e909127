"""Source spans for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass

from rat25f.tokens import Token, TokenKind

# One character per byte, so any input decodes.
SOURCE_ENCODING = "latin-1"


@dataclass(frozen=True)
class Span:
    """A range within a source file, 1-based and inclusive."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @classmethod
    def at(cls, file: str, line: int, col: int, width: int = 1) -> Span:
        return cls(file, line, col, line, col + max(1, width) - 1)

    @classmethod
    def of_token(cls, file: str, token: Token) -> Span:
        width = len(token.lexeme)
        if token.kind == TokenKind.STRING:
            width += 2  # quotes
        if "\n" in token.lexeme:
            width = 1
        return cls.at(file, token.line, token.column, width)

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"
