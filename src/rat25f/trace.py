"""Trace and policy configuration, and the sinks that receive trace output."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, TextIO

import click

from rat25f.grammar import SCAFFOLDING_RULES, STATEMENT_RULES, Production, Rule

ProductionFilter = Callable[[Production], bool]


# ── Suppression predicates ───────────────────────────────────────


def is_epsilon(production: Production) -> bool:
    return production.is_epsilon


def is_optional_scaffolding(production: Production) -> bool:
    """Productions of the ``<Opt ...>`` wrapper nonterminals."""
    return production.head.startswith("Opt ")


def is_top_level_scaffolding(production: Production) -> bool:
    return production.rule in SCAFFOLDING_RULES


# ── Configuration ────────────────────────────────────────────────


@dataclass(frozen=True)
class TraceConfig:
    """Which matched productions get reported.

    An empty ``rules`` set traces every rule; a non-empty one traces only
    the listed rules. ``extra_filters`` are additional suppression
    predicates applied after the built-in ones.
    """

    enabled: bool = True
    hide_epsilon: bool = True
    hide_optional: bool = True
    hide_scaffolding: bool = True
    rules: frozenset[Rule] = STATEMENT_RULES
    extra_filters: tuple[ProductionFilter, ...] = ()

    def suppressions(self) -> list[ProductionFilter]:
        filters: list[ProductionFilter] = []
        if self.hide_epsilon:
            filters.append(is_epsilon)
        if self.hide_optional:
            filters.append(is_optional_scaffolding)
        if self.hide_scaffolding:
            filters.append(is_top_level_scaffolding)
        filters.extend(self.extra_filters)
        return filters

    def should_trace(self, production: Production) -> bool:
        if not self.enabled:
            return False
        if self.rules and production.rule not in self.rules:
            return False
        return not any(hidden(production) for hidden in self.suppressions())


@dataclass(frozen=True)
class ParserPolicy:
    """Leniency and echo switches for the parser.

    ``lenient_keywords`` accepts an IDENTIFIER token wherever a keyword
    with the same text is expected. This is what lets words such as
    ``function`` and ``boolean``, which are not in the lexer's keyword
    table, work as keywords; a parser with leniency off must be paired
    with a keyword table that lists every keyword the grammar uses.
    KEYWORD tokens always compare case-insensitively, like the lexer's table.
    """

    echo_tokens: bool = True
    lenient_keywords: bool = True
    string_primary: bool = True


# ── Sinks ────────────────────────────────────────────────────────


class ProductionSink(Protocol):
    def emit(self, line: str) -> None: ...


class ConsoleSink:
    """Writes each line through ``click.echo`` (stdout unless a file is given)."""

    def __init__(self, file: TextIO | None = None) -> None:
        self.file = file

    def emit(self, line: str) -> None:
        click.echo(line, file=self.file)


@dataclass
class MemorySink:
    """Collects emitted lines in order."""

    lines: list[str] = field(default_factory=list)

    def emit(self, line: str) -> None:
        self.lines.append(line)

    def text(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)
