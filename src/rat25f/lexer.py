"""Lexer for the Rat25F language.

A pull-model scanner: each call to ``next_token`` reads just enough
characters from the source stream to produce one token. Malformed input
never raises; it comes back as UNKNOWN tokens for the parser to reject.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from typing import TextIO

from rat25f.tokens import (
    KEYWORDS,
    OPERATOR_START,
    SEPARATORS,
    TWO_CHAR_OPERATORS,
    Token,
    TokenKind,
)

_EOF_CHAR = ""


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_ident_rest(ch: str) -> bool:
    return _is_letter(ch) or _is_digit(ch) or ch in ("$", "_")


class Lexer:
    """Tokenizes Rat25F source one token at a time."""

    def __init__(self, source: TextIO | str) -> None:
        if isinstance(source, str):
            source = io.StringIO(source)
        self._stream = source
        self.line = 1
        self.col = 0
        self._current = _EOF_CHAR
        self._lookahead = self._stream.read(1)
        self._advance()

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok.kind == TokenKind.EOF:
                return
            yield tok

    # ── Character access ─────────────────────────────────────────

    @property
    def at_end(self) -> bool:
        return self._current == _EOF_CHAR

    def _peek(self) -> str:
        return self._lookahead

    def _advance(self) -> str:
        """Move to the next character and return the one left behind."""
        prev = self._current
        if prev == "\n":
            self.line += 1
            self.col = 0
        self._current = self._lookahead
        if self._current != _EOF_CHAR:
            self.col += 1
            self._lookahead = self._stream.read(1)
        return prev

    def _skip_whitespace(self) -> None:
        while not self.at_end and self._current.isspace():
            self._advance()

    # ── Dispatcher ───────────────────────────────────────────────

    def next_token(self) -> Token:
        """Scan and return the next token; EOF repeats once input is exhausted."""
        self._skip_whitespace()
        line, col = self.line, self.col
        ch = self._current

        if self.at_end:
            return Token(TokenKind.EOF, "", line, col + 1)
        if ch == '"':
            return self._scan_string(line, col)
        if ch == "." and _is_digit(self._peek()):
            return self._scan_fraction(line, col)
        if _is_letter(ch):
            return self._scan_identifier(line, col)
        if _is_digit(ch):
            return self._scan_number(line, col)
        if ch in SEPARATORS:
            self._advance()
            return Token(TokenKind.SEPARATOR, ch, line, col)
        if ch in OPERATOR_START:
            return self._scan_operator(line, col)

        self._advance()
        return Token(TokenKind.UNKNOWN, ch, line, col)

    # ── Scanners ─────────────────────────────────────────────────

    def _scan_string(self, line: int, col: int) -> Token:
        self._advance()  # opening "
        text = []
        while not self.at_end and self._current != '"':
            text.append(self._advance())
        if not self.at_end:
            self._advance()  # closing "
        return Token(TokenKind.STRING, "".join(text), line, col)

    def _scan_digits(self, text: list[str]) -> None:
        while not self.at_end and _is_digit(self._current):
            text.append(self._advance())

    def _scan_fraction(self, line: int, col: int) -> Token:
        text = [self._advance()]  # .
        self._scan_digits(text)
        return Token(TokenKind.REAL, "".join(text), line, col)

    def _scan_number(self, line: int, col: int) -> Token:
        text: list[str] = []
        self._scan_digits(text)
        # A '.' only belongs to the number when a digit follows it.
        if self._current == "." and _is_digit(self._peek()):
            text.append(self._advance())
            self._scan_digits(text)
            return Token(TokenKind.REAL, "".join(text), line, col)
        return Token(TokenKind.INTEGER, "".join(text), line, col)

    def _scan_identifier(self, line: int, col: int) -> Token:
        text = [self._advance()]
        while not self.at_end and _is_ident_rest(self._current):
            text.append(self._advance())
        word = "".join(text)
        if word.lower() in KEYWORDS:
            return Token(TokenKind.KEYWORD, word, line, col)
        return Token(TokenKind.IDENTIFIER, word, line, col)

    def _scan_operator(self, line: int, col: int) -> Token:
        two = self._current + self._peek()
        if two in TWO_CHAR_OPERATORS:
            self._advance()
            self._advance()
            return Token(TokenKind.OPERATOR, two, line, col)
        # Lone '!', '&' and '|' are still reported as operators.
        return Token(TokenKind.OPERATOR, self._advance(), line, col)


def tokenize(source: TextIO | str) -> list[Token]:
    """Lex the whole source, returning every token including the final EOF."""
    lexer = Lexer(source)
    tokens = list(lexer)
    tokens.append(lexer.next_token())
    return tokens
