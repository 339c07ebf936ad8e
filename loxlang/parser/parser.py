"""Main parser entry point for loxlang.

This module defines the `Parser` class, which coordinates the recursive
descent parsing process and owns the token cursor and the error list. The
actual parsing routines are split across `loxlang.parser.expressions` and
`loxlang.parser.statements`.

Syntax errors do not stop the parse. `eat` raises a `ParseError` that the
declaration loop catches; the parser then discards tokens up to the next
statement boundary and carries on, so one run reports every independent
error in the file.


File: parser.py
Version: 0.1.0
License: MIT
"""

import logging

from loxlang.exceptions import ParseError
from loxlang.lexer import Token, TokenType
from loxlang import nodes

from . import expressions as _expr
from . import statements as _stmt

logger = logging.getLogger(__name__)

# Tokens that plausibly begin a new declaration or statement.
STATEMENT_STARTS = (
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
)


class Parser:
    """loxlang parser."""

    def __init__(self, tokens: list[Token]):
        """
        Initialize the parser with a list of tokens.

        Parameters:
            tokens (list): A list of Token instances ending with ``EOF``.
        """
        self.tokens = tokens
        self.position = 0
        self.curr_token = self.tokens[self.position]
        self.errors: list[ParseError] = []

    @property
    def had_error(self) -> bool:
        """
        True once any syntax error has been reported.
        """
        return bool(self.errors)

    # Token cursor
    def previous(self) -> Token:
        """
        Return the most recently consumed token.
        """
        return self.tokens[self.position - 1]

    def is_at_end(self) -> bool:
        """
        Return True when the cursor sits on ``EOF``.
        """
        return self.curr_token.type == TokenType.EOF

    def advance(self) -> Token:
        """
        Consume the current token and return it.
        """
        if not self.is_at_end():
            self.position += 1
            self.curr_token = self.tokens[self.position]
        return self.previous()

    def check(self, token_type: TokenType) -> bool:
        """
        Return True if the current token has the given type, without consuming it.
        """
        if self.is_at_end():
            return False
        return self.curr_token.type == token_type

    def match(self, *token_types: TokenType) -> bool:
        """
        Consume the current token if it has any of the given types.
        """
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def eat(self, token_type: TokenType, message: str) -> Token:
        """
        Consume the current token if it matches the expected type.

        Parameters:
            token_type (TokenType): The expected token type.
            message (str): Diagnostic used when the token does not match.

        Raises:
            ParseError: If the token does not match the expected type.
        """
        if self.check(token_type):
            return self.advance()
        raise self.error(self.curr_token, message)

    def error(self, token: Token, message: str) -> ParseError:
        """
        Record a syntax error and return it so callers may raise it.

        Reporting alone does not unwind: callers that can keep going
        (invalid assignment targets, too many arguments) simply ignore the
        returned error.
        """
        err = ParseError(token, message)
        self.errors.append(err)
        return err

    def synchronize(self) -> None:
        """
        Discard tokens until a likely statement boundary.
        """
        self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.curr_token.type in STATEMENT_STARTS:
                return
            self.advance()

    # Expression wrappers
    def expr(self) -> nodes.Expr:
        """
        Parse a full expression starting from the lowest precedence level.
        """
        return _expr.parse_expr(self)

    def assignment(self) -> nodes.Expr:
        """
        Parse a right-associative assignment or fall through to logical or.
        """
        return _expr.parse_assignment(self)

    def logic_or(self) -> nodes.Expr:
        """
        Parse a logical OR expression.
        """
        return _expr.parse_logic_or(self)

    def logic_and(self) -> nodes.Expr:
        """
        Parse a logical AND expression.
        """
        return _expr.parse_logic_and(self)

    def equality(self) -> nodes.Expr:
        """
        Parse an equality expression (==, !=).
        """
        return _expr.parse_equality(self)

    def comparison(self) -> nodes.Expr:
        """
        Parse a comparison expression using relational operators.
        """
        return _expr.parse_comparison(self)

    def term(self) -> nodes.Expr:
        """
        Parse an addition or subtraction expression.
        """
        return _expr.parse_term(self)

    def factor(self) -> nodes.Expr:
        """
        Parse a multiplication or division expression.
        """
        return _expr.parse_factor(self)

    def unary(self) -> nodes.Expr:
        """
        Parse a prefix ``!`` or ``-`` expression.
        """
        return _expr.parse_unary(self)

    def call(self) -> nodes.Expr:
        """
        Parse a primary followed by call and property suffixes.
        """
        return _expr.parse_call(self)

    def primary(self) -> nodes.Expr:
        """
        Parse a literal, identifier, ``this`` or parenthesized group.
        """
        return _expr.parse_primary(self)

    # Statement wrappers
    def declaration(self) -> nodes.Stmt | None:
        """
        Parse a declaration, recovering from syntax errors.
        """
        return _stmt.parse_declaration(self)

    def statement(self) -> nodes.Stmt:
        """
        Parse a single statement.
        """
        return _stmt.parse_statement(self)

    def block(self) -> tuple[nodes.Stmt, ...]:
        """
        Parse the statements of a block after its opening brace.
        """
        return _stmt.parse_block(self)

    def function(self, kind: str) -> nodes.Function:
        """
        Parse a function or method declaration after its keyword.
        """
        return _stmt.parse_function(self, kind)

    def parse(self) -> list[nodes.Stmt]:
        """
        Parse the full input into a list of statements.

        Statements that failed to parse are left out; their errors are in
        ``self.errors``.
        """
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        logger.debug("parsed %d statements with %d errors", len(statements), len(self.errors))
        return statements
