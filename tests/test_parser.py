"""Tests for the Rat25F parser."""

from __future__ import annotations

import pytest

from rat25f.errors import ParseError
from rat25f.grammar import Rule, StartSymbol
from rat25f.lexer import Lexer
from rat25f.parser import Parser
from rat25f.trace import MemorySink, ParserPolicy, TraceConfig
from tests.helpers import ALL_RULES, QUIET, parse, productions

NO_TRACE = TraceConfig(enabled=False)


def parse_error(source: str, start: StartSymbol = StartSymbol.PROGRAM, **kwargs) -> ParseError:
    """Helper: parse source and return the ParseError it must raise."""
    with pytest.raises(ParseError) as excinfo:
        parse(source, start, **kwargs)
    return excinfo.value


class TestAcceptance:
    def test_empty_program(self):
        assert parse("", policy=QUIET) == []

    def test_declarations_and_assignment(self):
        parse("integer x; x = 1 + 2 * 3 ;", policy=QUIET)

    def test_sample_program(self, sample_program):
        parse(sample_program, policy=QUIET)

    def test_functions_only(self):
        parse("function f () { } function g (a, b integer, c real) real t; { t = a; return t; }")

    def test_function_with_empty_body_and_no_statements(self):
        parse("function main () { }", policy=QUIET)

    def test_multiple_declarations(self):
        parse("integer a, b; boolean c; real d; a = b;", policy=QUIET)

    def test_nested_compound_statements(self):
        parse("{ { x = 1; } { } }", StartSymbol.STATEMENT, policy=QUIET)

    def test_if_with_else(self):
        parse("if (a == b) x = 1; else { x = 2; y = 3; } fi", StartSymbol.STATEMENT, policy=QUIET)

    @pytest.mark.parametrize("relop", ["==", "!=", ">", "<", "<=", ">="])
    def test_every_relop(self, relop):
        parse(f"while (a {relop} b) a = a - 1;", StartSymbol.STATEMENT, policy=QUIET)

    def test_return_forms(self):
        parse("return;", StartSymbol.STATEMENT, policy=QUIET)
        parse("return x * (y + 1);", StartSymbol.STATEMENT, policy=QUIET)

    def test_scan_and_print(self):
        parse("get (a, b, c); put (a + b / c);", policy=QUIET)

    def test_unary_minus_and_reals(self):
        parse("x = -y * .5 + -2.75;", policy=QUIET)

    def test_call_suffix(self):
        parse("x = f(a, b) + g(c);", policy=QUIET)

    def test_boolean_literals_are_identifiers(self):
        lines = parse("b = true; c = false;", trace=ALL_RULES, policy=QUIET)
        assert lines.count("<Primary> -> <Identifier> <Primary Prime>") == 2
        assert "<Primary> -> true | false" not in lines

    def test_boolean_literal_takes_call_suffix(self):
        parse("x = true(a);", policy=QUIET)

    def test_string_primary(self):
        parse('put ("hello");', policy=QUIET)

    def test_keywords_match_case_insensitively(self):
        parse("IF (x < 1) x = 1; FI", StartSymbol.STATEMENT, policy=QUIET)

    def test_expression_start_symbol(self):
        parse("(a + 1) * -b / 2.0", StartSymbol.EXPRESSION, policy=QUIET)

    def test_program_stops_at_first_non_statement(self):
        # The statement list falls back to its empty production.
        parse("x = 1; 5", policy=QUIET)


class TestRejection:
    def test_missing_expression(self):
        err = parse_error("integer x; x = ;", policy=QUIET)
        assert (err.line, err.column) == (1, 16)
        assert err.lexeme == ";"
        assert "primary" in err.expected

    def test_error_message_format(self):
        err = parse_error("integer x; x = ;", policy=QUIET)
        assert str(err) == "Syntax error: primary expected at line 1, col 16 (near ';')"

    def test_error_position_on_later_line(self):
        err = parse_error("integer x;\nx = 1 +\n;", policy=QUIET)
        assert (err.line, err.column) == (3, 1)

    def test_unknown_token(self):
        err = parse_error("x = 1 # 2;", policy=QUIET)
        assert err.expected == "separator ';' expected"
        assert err.lexeme == "#"
        assert err.column == 7

    def test_missing_fi(self):
        err = parse_error("if (x < 1) x = 1;", StartSymbol.STATEMENT, policy=QUIET)
        assert err.expected == "'fi' expected"
        assert err.lexeme == ""

    def test_missing_relop(self):
        err = parse_error("while (x) x = 1;", StartSymbol.STATEMENT, policy=QUIET)
        assert err.expected == "relational operator expected"

    def test_assignment_is_not_a_relop(self):
        err = parse_error("if (x = 1) x = 2; fi", StartSymbol.STATEMENT, policy=QUIET)
        assert err.lexeme == "="

    def test_bad_qualifier(self):
        err = parse_error("function f (a string) { }", policy=QUIET)
        assert "qualifier" in err.expected
        assert err.lexeme == "string"

    def test_declaration_needs_semicolon(self):
        err = parse_error("integer x x = 1;", policy=QUIET)
        assert err.expected == "separator ';' expected"

    def test_statement_expected(self):
        err = parse_error("5;", StartSymbol.STATEMENT, policy=QUIET)
        assert err.expected == "statement expected"

    def test_call_arguments_must_be_identifiers(self):
        err = parse_error("x = f(1);", policy=QUIET)
        assert err.expected == "identifier expected"
        assert err.lexeme == "1"

    def test_unclosed_compound(self):
        err = parse_error("{ x = 1;", StartSymbol.STATEMENT, policy=QUIET)
        assert err.expected == "separator '}' expected"

    def test_first_error_wins(self):
        sink = MemorySink()
        parser = Parser(Lexer("x = ; y = ;"), NO_TRACE, QUIET, sink)
        with pytest.raises(ParseError) as excinfo:
            parser.parse()
        assert excinfo.value.column == 5


class TestPolicy:
    def test_strict_keywords_reject_function(self):
        strict = ParserPolicy(echo_tokens=False, lenient_keywords=False)
        err = parse_error("function f () { }", policy=strict)
        assert err.expected == "operator '=' expected"

    def test_strict_keywords_reject_boolean(self):
        strict = ParserPolicy(echo_tokens=False, lenient_keywords=False)
        with pytest.raises(ParseError):
            parse("boolean b; b = 1;", policy=strict)

    def test_lenient_identifier_match_is_exact_text(self):
        err = parse_error("Function f () { }", policy=QUIET)
        assert err.expected == "operator '=' expected"

    def test_string_primary_can_be_disabled(self):
        policy = ParserPolicy(echo_tokens=False, string_primary=False)
        err = parse_error('put ("hello");', policy=policy)
        assert err.expected == "primary expected"

    def test_token_echo(self):
        lines = parse("x = 1;", StartSymbol.STATEMENT, trace=NO_TRACE)
        assert lines == [
            "Token: Identifier Lexeme: x",
            "Token: Operator Lexeme: =",
            "Token: Integer Lexeme: 1",
            "Token: Separator Lexeme: ;",
        ]

    def test_echo_interleaves_with_productions(self):
        lines = parse("x = 1;", StartSymbol.STATEMENT)
        assert lines == [
            "<Statement> -> <Assign>",
            "<Assign> -> <Identifier> = <Expression> ;",
            "Token: Identifier Lexeme: x",
            "Token: Operator Lexeme: =",
            "Token: Integer Lexeme: 1",
            "Token: Separator Lexeme: ;",
        ]

    def test_echo_off_and_trace_off_is_silent(self, sample_program):
        assert parse(sample_program, trace=NO_TRACE, policy=QUIET) == []


class TestBanners:
    def test_banner_between_statements(self):
        lines = parse('integer x; x = 1; "note" x = 2;', trace=ALL_RULES)
        assert not any("note" in line for line in lines)
        assert not any("String" in line for line in lines)

    def test_banner_before_declarations(self):
        lines = parse('"header" integer x; x = 1;', trace=ALL_RULES)
        assert not any("header" in line for line in lines)

    def test_banners_around_functions(self):
        parse('"a" function f () { } "b" function g () { } "c" integer x; "d"', policy=QUIET)

    def test_banner_as_statement_body(self):
        lines = parse('if (x < 1) "skip" fi', StartSymbol.STATEMENT)
        assert not any("skip" in line for line in lines)

    def test_banner_inside_compound(self):
        parse('{ "first" x = 1; "second" }', StartSymbol.STATEMENT, policy=QUIET)

    def test_string_still_echoed_as_primary(self):
        lines = parse('put ("hi");', trace=NO_TRACE)
        assert "Token: String Lexeme: hi" in lines


class TestTrace:
    PROGRAM = (
        "integer x, y;\n"
        "x = 1;\n"
        "if (x < 2) y = x; fi\n"
        "while (x > 0) x = x - 1;\n"
    )

    def test_filter_to_single_rule(self):
        trace = TraceConfig(rules=frozenset({Rule.ASSIGN}))
        lines = parse(self.PROGRAM, trace=trace, policy=QUIET)
        assert len(lines) == 3
        assert all(line.startswith("<Assign> ->") for line in lines)

    def test_default_rules_are_statement_level(self):
        lines = parse(self.PROGRAM, policy=QUIET)
        assert "<Statement> -> <If>" in lines
        assert "<While> -> while ( <Condition> ) <Statement>" in lines
        assert not any(line.startswith("<Expression>") for line in lines)

    def test_expression_productions_in_order(self):
        assert productions("a + b", StartSymbol.EXPRESSION) == [
            "<Expression> -> <Term> <Expression Prime>",
            "<Term> -> <Factor> <Term Prime>",
            "<Factor> -> <Primary>",
            "<Primary> -> <Identifier> <Primary Prime>",
            "<Primary Prime> -> ε",
            "<Term Prime> -> ε",
            "<Expression Prime> -> + <Term> <Expression Prime>",
            "<Term> -> <Factor> <Term Prime>",
            "<Factor> -> <Primary>",
            "<Primary> -> <Identifier> <Primary Prime>",
            "<Primary Prime> -> ε",
            "<Term Prime> -> ε",
            "<Expression Prime> -> ε",
        ]

    def test_relop_traced_with_operator(self):
        lines = productions("while (a <= b) a = b;", StartSymbol.STATEMENT)
        assert "<Relop> -> <=" in lines

    def test_program_scaffolding(self):
        lines = productions("")
        assert lines == [
            "<Rat25F> -> <Opt Function Definitions> <Opt Declaration List> <Statement List>",
            "<Opt Function Definitions> -> ε",
            "<Opt Declaration List> -> ε",
            "<Statement List> -> ε",
        ]

    def test_default_suppression(self, sample_program):
        lines = parse(sample_program, trace=ALL_RULES, policy=QUIET)
        assert lines
        assert not any("ε" in line for line in lines)
        assert not any(line.startswith("<Opt ") for line in lines)
        assert not any(line.startswith("<Rat25F>") for line in lines)
        assert not any(line.startswith("<Statement List") for line in lines)

    def test_extra_filter(self):
        trace = TraceConfig(extra_filters=(lambda p: p.rule is Rule.STATEMENT,))
        lines = parse("x = 1;", StartSymbol.STATEMENT, trace=trace, policy=QUIET)
        assert lines == ["<Assign> -> <Identifier> = <Expression> ;"]

    def test_reparse_is_identical(self, sample_program):
        first = MemorySink()
        second = MemorySink()
        Parser(Lexer(sample_program), ALL_RULES, sink=first).parse()
        Parser(Lexer(sample_program), ALL_RULES, sink=second).parse()
        assert first.text() == second.text()
        assert first.lines
