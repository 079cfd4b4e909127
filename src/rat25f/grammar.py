"""Grammar rule tags, start symbols and production records for Rat25F."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

EPSILON = "ε"


class Rule(Enum):
    """One tag per nonterminal; the value is the name shown in traces."""

    # Top level
    RAT25F = "Rat25F"
    OPT_FUNCTION_DEFINITIONS = "Opt Function Definitions"
    FUNCTION_DEFINITIONS = "Function Definitions"
    FUNCTION_DEFINITIONS_PRIME = "Function Definitions Prime"
    FUNCTION = "Function"
    OPT_PARAMETER_LIST = "Opt Parameter List"
    PARAMETER_LIST = "Parameter List"
    PARAMETER_LIST_PRIME = "Parameter List Prime"
    PARAMETER = "Parameter"
    QUALIFIER = "Qualifier"
    BODY = "Body"
    OPT_DECLARATION_LIST = "Opt Declaration List"
    DECLARATION_LIST = "Declaration List"
    DECLARATION_LIST_PRIME = "Declaration List Prime"
    DECLARATION = "Declaration"
    IDS = "IDs"
    IDS_PRIME = "IDs Prime"

    # Statements
    STATEMENT_LIST = "Statement List"
    STATEMENT_LIST_PRIME = "Statement List Prime"
    STATEMENT = "Statement"
    COMPOUND = "Compound"
    ASSIGN = "Assign"
    IF = "If"
    OPT_ELSE = "OptElse"
    RETURN = "Return"
    PRINT = "Print"
    SCAN = "Scan"
    WHILE = "While"

    # Expressions
    CONDITION = "Condition"
    RELOP = "Relop"
    EXPRESSION = "Expression"
    EXPRESSION_PRIME = "Expression Prime"
    TERM = "Term"
    TERM_PRIME = "Term Prime"
    FACTOR = "Factor"
    PRIMARY = "Primary"
    PRIMARY_PRIME = "Primary Prime"

    @classmethod
    def lookup(cls, name: str) -> Rule:
        """Find a rule by display name or enum name, ignoring case and spacing."""
        key = name.replace("_", " ").strip().lower()
        for rule in cls:
            if key in (rule.value.lower(), rule.name.replace("_", " ").lower()):
                return rule
        raise ValueError(f"unknown grammar rule: {name!r}")


class StartSymbol(Enum):
    PROGRAM = auto()
    STATEMENT = auto()
    EXPRESSION = auto()


@dataclass(frozen=True)
class Production:
    """A production as matched by the parser, e.g. ``<Assign> -> ...``."""

    rule: Rule
    body: str

    @property
    def head(self) -> str:
        return self.rule.value

    @property
    def is_epsilon(self) -> bool:
        return self.body == EPSILON

    def __str__(self) -> str:
        return f"<{self.head}> -> {self.body}"


STATEMENT_RULES: frozenset[Rule] = frozenset({
    Rule.STATEMENT,
    Rule.ASSIGN,
    Rule.IF,
    Rule.RETURN,
    Rule.PRINT,
    Rule.SCAN,
    Rule.WHILE,
})

SCAFFOLDING_RULES: frozenset[Rule] = frozenset({
    Rule.RAT25F,
    Rule.STATEMENT_LIST,
    Rule.STATEMENT_LIST_PRIME,
})
