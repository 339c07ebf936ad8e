"""Expression parsing utilities for loxlang.

These functions operate on a `loxlang.parser.parser.Parser` instance and
implement the recursive descent logic for expressions, maintaining
operator precedence and associativity. Precedence, lowest first:
assignment, ``or``, ``and``, equality, comparison, term, factor, unary,
call, primary.


File: expressions.py
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang.lexer import TokenType
from loxlang import nodes

if TYPE_CHECKING:
    from loxlang.parser import Parser

MAX_ARGUMENTS = 255


# ---- Entry point ----

def parse_expr(parser: 'Parser') -> nodes.Expr:
    """Parse an expression starting from the lowest-precedence operator."""
    return parser.assignment()


def parse_assignment(parser: 'Parser') -> nodes.Expr:
    """
    Parse an assignment.

    The left-hand side is parsed as an ordinary expression first and only
    then checked for being a valid target, so ``a.b.c = 1`` needs no extra
    lookahead. Any other target is reported without entering panic mode.

    Syntax:
        ( <call> "." )? <identifier> = <assignment> | <logic_or>
    """
    expr = parser.logic_or()

    if parser.match(TokenType.EQUAL):
        equals = parser.previous()
        value = parser.assignment()

        match expr:
            case nodes.Variable(name=name):
                return nodes.Assign(name, value)
            case nodes.Get(object=obj, name=name):
                return nodes.Set(obj, name, value)

        parser.error(equals, "Invalid assignment target.")

    return expr


def parse_logic_or(parser: 'Parser') -> nodes.Expr:
    """Parse logical OR expressions using the 'or' keyword."""
    result = parser.logic_and()
    while parser.match(TokenType.OR):
        operator = parser.previous()
        result = nodes.Logical(result, operator, parser.logic_and())
    return result


def parse_logic_and(parser: 'Parser') -> nodes.Expr:
    """Parse logical AND expressions using the 'and' keyword."""
    result = parser.equality()
    while parser.match(TokenType.AND):
        operator = parser.previous()
        result = nodes.Logical(result, operator, parser.equality())
    return result


def parse_equality(parser: 'Parser') -> nodes.Expr:
    """Parse equality expressions (==, !=)."""
    result = parser.comparison()
    while parser.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
        operator = parser.previous()
        result = nodes.Binary(result, operator, parser.comparison())
    return result


def parse_comparison(parser: 'Parser') -> nodes.Expr:
    """Parse comparison expressions (<, >, <=, >=)."""
    result = parser.term()
    while parser.match(
        TokenType.GREATER,
        TokenType.GREATER_EQUAL,
        TokenType.LESS,
        TokenType.LESS_EQUAL,
    ):
        operator = parser.previous()
        result = nodes.Binary(result, operator, parser.term())
    return result


def parse_term(parser: 'Parser') -> nodes.Expr:
    """Parse addition and subtraction expressions."""
    result = parser.factor()
    while parser.match(TokenType.MINUS, TokenType.PLUS):
        operator = parser.previous()
        result = nodes.Binary(result, operator, parser.factor())
    return result


def parse_factor(parser: 'Parser') -> nodes.Expr:
    """Parse multiplication and division expressions."""
    result = parser.unary()
    while parser.match(TokenType.SLASH, TokenType.STAR):
        operator = parser.previous()
        result = nodes.Binary(result, operator, parser.unary())
    return result


def parse_unary(parser: 'Parser') -> nodes.Expr:
    """Parse prefix negation and logical not."""
    if parser.match(TokenType.BANG, TokenType.MINUS):
        operator = parser.previous()
        return nodes.Unary(operator, parser.unary())
    return parser.call()


def _finish_call(parser: 'Parser', callee: nodes.Expr) -> nodes.Call:
    """
    Parse the argument list of a call whose '(' was just consumed.

    Exceeding the argument limit is reported but the call is still built.
    """
    arguments = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(arguments) >= MAX_ARGUMENTS:
                parser.error(parser.curr_token, "Can't have more than 255 arguments.")
            arguments.append(parser.expr())
            if not parser.match(TokenType.COMMA):
                break

    paren = parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
    return nodes.Call(callee, paren, tuple(arguments))


def parse_call(parser: 'Parser') -> nodes.Expr:
    """
    Parse call and property-access suffixes, applied left to right.

    Syntax:
        <primary> ( "(" <arguments>? ")" | "." <identifier> )*
    """
    expr = parser.primary()
    while True:
        if parser.match(TokenType.LEFT_PAREN):
            expr = _finish_call(parser, expr)
        elif parser.match(TokenType.DOT):
            name = parser.eat(TokenType.IDENTIFIER, "Expect property name after '.'.")
            expr = nodes.Get(expr, name)
        else:
            break
    return expr


# ---- Highest precedence ----

def parse_primary(parser: 'Parser') -> nodes.Expr:
    """Parse a literal, variable, 'this', or parenthesized expression."""
    if parser.match(TokenType.FALSE):
        return nodes.Literal(False)
    if parser.match(TokenType.TRUE):
        return nodes.Literal(True)
    if parser.match(TokenType.NIL):
        return nodes.Literal(None)

    if parser.match(TokenType.NUMBER, TokenType.STRING):
        return nodes.Literal(parser.previous().literal)

    if parser.match(TokenType.THIS):
        return nodes.This(parser.previous())

    if parser.match(TokenType.IDENTIFIER):
        return nodes.Variable(parser.previous())

    if parser.match(TokenType.LEFT_PAREN):
        expr = parser.expr()
        parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
        return nodes.Grouping(expr)

    raise parser.error(parser.curr_token, "Expect expression.")
