"""Syntax errors and compiler-style diagnostic rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rat25f.source import SOURCE_ENCODING, Span
from rat25f.tokens import Token


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


_COLORS = {
    Severity.ERROR: "\033[1;31m",
    Severity.WARNING: "\033[1;33m",
    Severity.NOTE: "\033[1;36m",
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"

SYNTAX_ERROR_CODE = "E200"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str


@dataclass
class Diagnostic:
    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class ParseError(Exception):
    """The first point at which the input stopped matching the grammar.

    Raised from inside the failing nonterminal procedure and propagated
    unchanged to the caller of ``Parser.parse``.
    """

    def __init__(self, expected: str, token: Token) -> None:
        self.expected = expected
        self.token = token
        self.lexeme = token.lexeme
        self.line = token.line
        self.column = token.column
        super().__init__(
            f"Syntax error: {expected} at line {self.line}, "
            f"col {self.column} (near '{self.lexeme}')"
        )

    def to_diagnostic(self, filename: str = "<input>") -> Diagnostic:
        found = self.token.kind.label
        if self.lexeme:
            found = f"{found} '{self.lexeme}'"
        return Diagnostic(
            severity=Severity.ERROR,
            code=SYNTAX_ERROR_CODE,
            message=f"syntax error: {self.expected}",
            labels=[DiagnosticLabel(Span.of_token(filename, self.token), f"found {found}")],
        )


class DiagnosticRenderer:
    """Renders diagnostics as ``error[E200]: ...`` blocks with a caret line."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._sources: dict[str, list[str]] = {}

    def add_source(self, filename: str, text: str) -> None:
        """Register in-memory text so lines can be shown without rereading."""
        self._sources[filename] = text.splitlines()

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _source_line(self, filename: str, line_num: int) -> str | None:
        if filename not in self._sources:
            path = Path(filename)
            lines = []
            try:
                if path.is_file():
                    lines = path.read_text(encoding=SOURCE_ENCODING).splitlines()
            except OSError:
                pass
            self._sources[filename] = lines
        lines = self._sources[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        color = _COLORS[diag.severity]
        bar = f"{self._c(_BLUE)}     |{self._c(_RESET)}"
        out = [
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        ]

        for label in diag.labels:
            span = label.span
            out.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            out.append(f"  {bar}")
            source_line = self._source_line(span.file, span.start_line)
            if source_line is not None:
                out.append(
                    f"  {self._c(_BLUE)}{span.start_line:>4} |{self._c(_RESET)} "
                    f"{source_line}"
                )
                width = max(1, span.end_col - span.start_col + 1)
                out.append(
                    f"  {bar} {' ' * (span.start_col - 1)}"
                    f"{self._c(color)}{'^' * width} {label.message}{self._c(_RESET)}"
                )
            elif label.message:
                out.append(f"  {bar}   {self._c(color)}{label.message}{self._c(_RESET)}")

        for note in diag.notes:
            out.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(out)
