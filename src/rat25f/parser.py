"""LL(1) recursive-descent recognizer for Rat25F.

Each nonterminal has one ``_parse_*`` method that picks its production
from the single lookahead token, reports the production to the trace
sink, and either descends, consumes a terminal, or raises ``ParseError``.
Nothing is built; a successful ``parse`` simply returns.
"""

from __future__ import annotations

from rat25f.errors import ParseError
from rat25f.grammar import EPSILON, Production, Rule, StartSymbol
from rat25f.lexer import Lexer
from rat25f.tokens import QUALIFIERS, RELOPS, Token, TokenKind
from rat25f.trace import ConsoleSink, ParserPolicy, ProductionSink, TraceConfig

# Keywords that can begin a statement (besides '{' and an identifier).
_STATEMENT_KEYWORDS = ("if", "return", "put", "get", "while")


class Parser:
    """Validates a Rat25F token stream pulled from a ``Lexer``."""

    def __init__(
        self,
        lexer: Lexer,
        trace: TraceConfig | None = None,
        policy: ParserPolicy | None = None,
        sink: ProductionSink | None = None,
    ) -> None:
        self.lexer = lexer
        self.trace = trace or TraceConfig()
        self.policy = policy or ParserPolicy()
        self.sink = sink if sink is not None else ConsoleSink()
        self.tok: Token = lexer.next_token()

    def parse(self, start: StartSymbol = StartSymbol.PROGRAM) -> None:
        """Recognize the input from the given start symbol.

        Raises ParseError at the first token that no production accepts.
        """
        match start:
            case StartSymbol.PROGRAM:
                self._parse_rat25f()
            case StartSymbol.STATEMENT:
                self._parse_statement()
            case StartSymbol.EXPRESSION:
                self._parse_expression()

    # ── Token helpers ────────────────────────────────────────────

    def _advance(self) -> None:
        self.tok = self.lexer.next_token()

    def _consume(self) -> None:
        """Echo the current terminal and move past it."""
        if self.policy.echo_tokens and self.tok.kind != TokenKind.EOF:
            self.sink.emit(self.tok.describe())
        self._advance()

    def _is_kw(self, word: str) -> bool:
        tok = self.tok
        if tok.kind == TokenKind.KEYWORD:
            return tok.lexeme.lower() == word
        if self.policy.lenient_keywords and tok.kind == TokenKind.IDENTIFIER:
            return tok.lexeme == word
        return False

    def _is_op(self, op: str) -> bool:
        return self.tok.kind == TokenKind.OPERATOR and self.tok.lexeme == op

    def _is_sep(self, sep: str) -> bool:
        return self.tok.kind == TokenKind.SEPARATOR and self.tok.lexeme == sep

    def _at(self, kind: TokenKind) -> bool:
        return self.tok.kind == kind

    def _at_qualifier(self) -> bool:
        return any(self._is_kw(q) for q in QUALIFIERS)

    def _at_statement_start(self) -> bool:
        return (
            self._is_sep("{")
            or self._at(TokenKind.IDENTIFIER)
            or any(self._is_kw(kw) for kw in _STATEMENT_KEYWORDS)
        )

    def _at_list_end(self) -> bool:
        return self._at(TokenKind.EOF) or self._is_sep("}")

    def _error(self, expected: str) -> ParseError:
        return ParseError(expected, self.tok)

    def _expect_identifier(self) -> None:
        if not self._at(TokenKind.IDENTIFIER):
            raise self._error("identifier expected")
        self._consume()

    def _expect_kw(self, word: str) -> None:
        if not self._is_kw(word):
            raise self._error(f"'{word}' expected")
        self._consume()

    def _expect_op(self, op: str) -> None:
        if not self._is_op(op):
            raise self._error(f"operator '{op}' expected")
        self._consume()

    def _expect_sep(self, sep: str) -> None:
        if not self._is_sep(sep):
            raise self._error(f"separator '{sep}' expected")
        self._consume()

    def _skip_banners(self) -> None:
        """Drop bare string literals between grammar sections, without echo."""
        while self._at(TokenKind.STRING):
            self._advance()

    def _prod(self, rule: Rule, body: str) -> None:
        production = Production(rule, body)
        if self.trace.should_trace(production):
            self.sink.emit(str(production))

    # ── Program ──────────────────────────────────────────────────

    def _parse_rat25f(self) -> None:
        self._prod(
            Rule.RAT25F,
            "<Opt Function Definitions> <Opt Declaration List> <Statement List>",
        )
        self._skip_banners()
        self._parse_opt_function_definitions()
        self._skip_banners()
        self._parse_opt_declaration_list()
        self._skip_banners()
        self._parse_statement_list()

    # ── Function definitions ─────────────────────────────────────

    def _parse_opt_function_definitions(self) -> None:
        self._skip_banners()
        if self._is_kw("function"):
            self._prod(Rule.OPT_FUNCTION_DEFINITIONS, "<Function Definitions>")
            self._parse_function_definitions()
        else:
            self._prod(Rule.OPT_FUNCTION_DEFINITIONS, EPSILON)

    def _parse_function_definitions(self) -> None:
        self._prod(
            Rule.FUNCTION_DEFINITIONS, "<Function> <Function Definitions Prime>"
        )
        self._parse_function()
        self._parse_function_definitions_prime()

    def _parse_function_definitions_prime(self) -> None:
        while True:
            self._skip_banners()
            if not self._is_kw("function"):
                break
            self._prod(
                Rule.FUNCTION_DEFINITIONS_PRIME,
                "<Function> <Function Definitions Prime>",
            )
            self._parse_function()
        self._prod(Rule.FUNCTION_DEFINITIONS_PRIME, EPSILON)

    def _parse_function(self) -> None:
        self._prod(
            Rule.FUNCTION,
            "function <Identifier> ( <Opt Parameter List> ) "
            "<Opt Declaration List> <Body>",
        )
        self._expect_kw("function")
        self._expect_identifier()
        self._expect_sep("(")
        self._parse_opt_parameter_list()
        self._expect_sep(")")
        self._parse_opt_declaration_list()
        self._parse_body()

    def _parse_opt_parameter_list(self) -> None:
        # Parameters open with their identifiers, not the qualifier.
        if self._at(TokenKind.IDENTIFIER):
            self._prod(Rule.OPT_PARAMETER_LIST, "<Parameter List>")
            self._parse_parameter_list()
        else:
            self._prod(Rule.OPT_PARAMETER_LIST, EPSILON)

    def _parse_parameter_list(self) -> None:
        self._prod(Rule.PARAMETER_LIST, "<Parameter> <Parameter List Prime>")
        self._parse_parameter()
        self._parse_parameter_list_prime()

    def _parse_parameter_list_prime(self) -> None:
        while self._is_sep(","):
            self._prod(
                Rule.PARAMETER_LIST_PRIME, ", <Parameter> <Parameter List Prime>"
            )
            self._expect_sep(",")
            self._parse_parameter()
        self._prod(Rule.PARAMETER_LIST_PRIME, EPSILON)

    def _parse_parameter(self) -> None:
        self._prod(Rule.PARAMETER, "<IDs> <Qualifier>")
        self._parse_ids()
        self._parse_qualifier()

    def _parse_qualifier(self) -> None:
        if not self._at_qualifier():
            raise self._error("qualifier (integer|boolean|real) expected")
        self._prod(Rule.QUALIFIER, "integer | boolean | real")
        self._consume()

    def _parse_body(self) -> None:
        self._prod(Rule.BODY, "{ <Opt Statement List> }")
        self._expect_sep("{")
        self._parse_opt_statement_list()
        self._expect_sep("}")

    # ── Declarations ─────────────────────────────────────────────

    def _parse_opt_declaration_list(self) -> None:
        if self._at_qualifier():
            self._prod(Rule.OPT_DECLARATION_LIST, "<Declaration List>")
            self._parse_declaration_list()
        else:
            self._prod(Rule.OPT_DECLARATION_LIST, EPSILON)

    def _parse_declaration_list(self) -> None:
        self._prod(
            Rule.DECLARATION_LIST, "<Declaration> ; <Declaration List Prime>"
        )
        self._parse_declaration()
        self._expect_sep(";")
        self._parse_declaration_list_prime()

    def _parse_declaration_list_prime(self) -> None:
        while self._at_qualifier():
            self._prod(
                Rule.DECLARATION_LIST_PRIME,
                "<Declaration> ; <Declaration List Prime>",
            )
            self._parse_declaration()
            self._expect_sep(";")
        self._prod(Rule.DECLARATION_LIST_PRIME, EPSILON)

    def _parse_declaration(self) -> None:
        self._prod(Rule.DECLARATION, "<Qualifier> <IDs>")
        self._parse_qualifier()
        self._parse_ids()

    def _parse_ids(self) -> None:
        self._prod(Rule.IDS, "<Identifier> <IDs Prime>")
        self._expect_identifier()
        self._parse_ids_prime()

    def _parse_ids_prime(self) -> None:
        if self._is_sep(","):
            self._prod(Rule.IDS_PRIME, ", <IDs>")
            self._expect_sep(",")
            self._parse_ids()
        else:
            self._prod(Rule.IDS_PRIME, EPSILON)

    # ── Statements ───────────────────────────────────────────────

    def _parse_statement_list(self) -> None:
        self._skip_banners()
        if not self._at_list_end() and self._at_statement_start():
            self._prod(Rule.STATEMENT_LIST, "<Statement> <Statement List Prime>")
            self._parse_statement()
            self._parse_statement_list_prime()
        else:
            self._prod(Rule.STATEMENT_LIST, EPSILON)

    def _parse_statement_list_prime(self) -> None:
        while True:
            self._skip_banners()
            if self._at_list_end() or not self._at_statement_start():
                break
            self._prod(
                Rule.STATEMENT_LIST_PRIME, "<Statement> <Statement List Prime>"
            )
            self._parse_statement()
        self._prod(Rule.STATEMENT_LIST_PRIME, EPSILON)

    def _parse_opt_statement_list(self) -> None:
        if self._at_list_end():
            self._prod(Rule.STATEMENT_LIST, EPSILON)
        else:
            self._parse_statement_list()

    def _parse_statement(self) -> None:
        tok = self.tok
        if tok.kind == TokenKind.STRING:
            # A bare string used as a statement is a no-op banner.
            self._advance()
        elif self._is_sep("{"):
            self._prod(Rule.STATEMENT, "<Compound>")
            self._parse_compound()
        elif tok.kind == TokenKind.IDENTIFIER:
            self._prod(Rule.STATEMENT, "<Assign>")
            self._parse_assign()
        elif self._is_kw("if"):
            self._prod(Rule.STATEMENT, "<If>")
            self._parse_if()
        elif self._is_kw("return"):
            self._prod(Rule.STATEMENT, "<Return>")
            self._parse_return()
        elif self._is_kw("put"):
            self._prod(Rule.STATEMENT, "<Print>")
            self._parse_print()
        elif self._is_kw("get"):
            self._prod(Rule.STATEMENT, "<Scan>")
            self._parse_scan()
        elif self._is_kw("while"):
            self._prod(Rule.STATEMENT, "<While>")
            self._parse_while()
        else:
            raise self._error("statement expected")

    def _parse_compound(self) -> None:
        self._prod(Rule.COMPOUND, "{ <Statement List> }")
        self._expect_sep("{")
        self._parse_statement_list()
        self._expect_sep("}")

    def _parse_assign(self) -> None:
        self._prod(Rule.ASSIGN, "<Identifier> = <Expression> ;")
        self._expect_identifier()
        self._expect_op("=")
        self._parse_expression()
        self._expect_sep(";")

    def _parse_if(self) -> None:
        self._prod(Rule.IF, "if ( <Condition> ) <Statement> <OptElse> fi")
        self._expect_kw("if")
        self._expect_sep("(")
        self._parse_condition()
        self._expect_sep(")")
        self._parse_statement()
        self._parse_opt_else()
        self._expect_kw("fi")

    def _parse_opt_else(self) -> None:
        if self._is_kw("else"):
            self._prod(Rule.OPT_ELSE, "else <Statement>")
            self._expect_kw("else")
            self._parse_statement()
        else:
            self._prod(Rule.OPT_ELSE, EPSILON)

    def _parse_return(self) -> None:
        self._prod(Rule.RETURN, "return ; | return <Expression> ;")
        self._expect_kw("return")
        if not self._is_sep(";"):
            self._parse_expression()
        self._expect_sep(";")

    def _parse_print(self) -> None:
        self._prod(Rule.PRINT, "put ( <Expression> ) ;")
        self._expect_kw("put")
        self._expect_sep("(")
        self._parse_expression()
        self._expect_sep(")")
        self._expect_sep(";")

    def _parse_scan(self) -> None:
        self._prod(Rule.SCAN, "get ( <IDs> ) ;")
        self._expect_kw("get")
        self._expect_sep("(")
        self._parse_ids()
        self._expect_sep(")")
        self._expect_sep(";")

    def _parse_while(self) -> None:
        self._prod(Rule.WHILE, "while ( <Condition> ) <Statement>")
        self._expect_kw("while")
        self._expect_sep("(")
        self._parse_condition()
        self._expect_sep(")")
        self._parse_statement()

    # ── Expressions ──────────────────────────────────────────────

    def _parse_condition(self) -> None:
        self._prod(Rule.CONDITION, "<Expression> <Relop> <Expression>")
        self._parse_expression()
        self._parse_relop()
        self._parse_expression()

    def _parse_relop(self) -> None:
        if not (self._at(TokenKind.OPERATOR) and self.tok.lexeme in RELOPS):
            raise self._error("relational operator expected")
        self._prod(Rule.RELOP, self.tok.lexeme)
        self._consume()

    def _parse_expression(self) -> None:
        self._prod(Rule.EXPRESSION, "<Term> <Expression Prime>")
        self._parse_term()
        self._parse_expression_prime()

    def _parse_expression_prime(self) -> None:
        while self._is_op("+") or self._is_op("-"):
            op = self.tok.lexeme
            self._prod(Rule.EXPRESSION_PRIME, f"{op} <Term> <Expression Prime>")
            self._expect_op(op)
            self._parse_term()
        self._prod(Rule.EXPRESSION_PRIME, EPSILON)

    def _parse_term(self) -> None:
        self._prod(Rule.TERM, "<Factor> <Term Prime>")
        self._parse_factor()
        self._parse_term_prime()

    def _parse_term_prime(self) -> None:
        while self._is_op("*") or self._is_op("/"):
            op = self.tok.lexeme
            self._prod(Rule.TERM_PRIME, f"{op} <Factor> <Term Prime>")
            self._expect_op(op)
            self._parse_factor()
        self._prod(Rule.TERM_PRIME, EPSILON)

    def _parse_factor(self) -> None:
        if self._is_op("-"):
            self._prod(Rule.FACTOR, "- <Primary>")
            self._expect_op("-")
        else:
            self._prod(Rule.FACTOR, "<Primary>")
        self._parse_primary()

    def _parse_primary(self) -> None:
        tok = self.tok
        if tok.kind == TokenKind.IDENTIFIER:
            self._prod(Rule.PRIMARY, "<Identifier> <Primary Prime>")
            self._expect_identifier()
            self._parse_primary_prime()
        elif tok.kind == TokenKind.INTEGER:
            self._prod(Rule.PRIMARY, "<Integer>")
            self._consume()
        elif tok.kind == TokenKind.REAL:
            self._prod(Rule.PRIMARY, "<Real>")
            self._consume()
        elif self._is_sep("("):
            self._prod(Rule.PRIMARY, "( <Expression> )")
            self._expect_sep("(")
            self._parse_expression()
            self._expect_sep(")")
        elif tok.kind == TokenKind.KEYWORD and tok.lexeme.lower() in ("true", "false"):
            # Only reachable when the keyword table lists true and false.
            self._prod(Rule.PRIMARY, "true | false")
            self._consume()
        elif self.policy.string_primary and tok.kind == TokenKind.STRING:
            self._prod(Rule.PRIMARY, "<String>")
            self._consume()
        else:
            raise self._error("primary expected")

    def _parse_primary_prime(self) -> None:
        if self._is_sep("("):
            self._prod(Rule.PRIMARY_PRIME, "( <IDs> )")
            self._expect_sep("(")
            self._parse_ids()
            self._expect_sep(")")
        else:
            self._prod(Rule.PRIMARY_PRIME, EPSILON)
