"""Shared test helpers for the Rat25F test suite."""

from __future__ import annotations

from rat25f.grammar import StartSymbol
from rat25f.lexer import Lexer
from rat25f.parser import Parser
from rat25f.trace import MemorySink, ParserPolicy, TraceConfig

QUIET = ParserPolicy(echo_tokens=False)
ALL_RULES = TraceConfig(rules=frozenset())


def parse(
    source: str,
    start: StartSymbol = StartSymbol.PROGRAM,
    *,
    trace: TraceConfig | None = None,
    policy: ParserPolicy | None = None,
) -> list[str]:
    """Parse source, asserting nothing; return the lines sent to the sink."""
    sink = MemorySink()
    Parser(Lexer(source), trace, policy, sink).parse(start)
    return sink.lines


def productions(source: str, start: StartSymbol = StartSymbol.PROGRAM) -> list[str]:
    """Every traced production (no token echo, no suppression)."""
    trace = TraceConfig(
        hide_epsilon=False, hide_optional=False, hide_scaffolding=False,
        rules=frozenset(),
    )
    return parse(source, start, trace=trace, policy=QUIET)
