"""Token kinds and token representation for the Rat25F lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    IDENTIFIER = "Identifier"
    KEYWORD = "Keyword"
    INTEGER = "Integer"
    REAL = "Real"
    OPERATOR = "Operator"
    SEPARATOR = "Separator"
    STRING = "String"
    UNKNOWN = "Unknown"
    EOF = "EOF"

    @property
    def label(self) -> str:
        """Human-readable name used when echoing tokens."""
        return self.value


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    lexeme: str
    line: int
    column: int

    def describe(self) -> str:
        return f"Token: {self.kind.label} Lexeme: {self.lexeme}"


# Matched case-insensitively by the lexer.
KEYWORDS: frozenset[str] = frozenset({
    "integer",
    "int",
    "real",
    "if",
    "else",
    "fi",
    "while",
    "return",
    "get",
    "put",
})

SEPARATORS: frozenset[str] = frozenset("(){}[],;")

OPERATOR_START: frozenset[str] = frozenset("+-*/=<>!&|")

TWO_CHAR_OPERATORS: frozenset[str] = frozenset({
    "==", "!=", "<=", ">=", "&&", "||",
})

QUALIFIERS: tuple[str, ...] = ("integer", "boolean", "real")

RELOPS: frozenset[str] = frozenset({"==", "!=", ">", "<", "<=", ">="})
