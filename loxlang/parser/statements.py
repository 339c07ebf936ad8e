"""Statement parsing utilities for loxlang.

These functions operate on a `loxlang.parser.parser.Parser` instance and
handle the various statement forms in the language such as blocks,
conditionals, loops, and function and class declarations.


File: statements.py
Version: 0.1.0
License: MIT
"""

from typing import TYPE_CHECKING

from loxlang.exceptions import ParseError
from loxlang.lexer import TokenType
from loxlang import nodes

from .expressions import MAX_ARGUMENTS

if TYPE_CHECKING:
    from loxlang.parser import Parser


def parse_declaration(parser: 'Parser') -> nodes.Stmt | None:
    """
    Parse a declaration and recover from any syntax error inside it.

    This is the panic-mode boundary: a `ParseError` raised anywhere below
    lands here, the parser skips ahead to the next statement boundary and
    ``None`` is returned in place of the broken statement.

    Syntax:
        <class_decl> | <fun_decl> | <var_decl> | <statement>
    """
    try:
        if parser.match(TokenType.CLASS):
            return parse_class_declaration(parser)
        if parser.match(TokenType.FUN):
            return parser.function("function")
        if parser.match(TokenType.VAR):
            return parse_var_declaration(parser)
        return parser.statement()
    except ParseError:
        parser.synchronize()
        return None


def parse_class_declaration(parser: 'Parser') -> nodes.Class:
    """
    Parse a class declaration.

    Syntax:
        class <identifier> { <function>* }
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect class name.")
    parser.eat(TokenType.LEFT_BRACE, "Expect '{' before class body.")

    methods = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.is_at_end():
        methods.append(parser.function("method"))

    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
    return nodes.Class(name, tuple(methods))


def parse_function(parser: 'Parser', kind: str) -> nodes.Function:
    """
    Parse a function or method declaration.

    Syntax:
        <identifier> ( <params>? ) { <block> }

    Args:
        parser: The parser instance.
        kind: ``"function"`` or ``"method"``, used in diagnostics.
    """
    name = parser.eat(TokenType.IDENTIFIER, f"Expect {kind} name.")
    parser.eat(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
    params = []
    if not parser.check(TokenType.RIGHT_PAREN):
        while True:
            if len(params) >= MAX_ARGUMENTS:
                parser.error(parser.curr_token, "Can't have more than 255 parameters.")
            params.append(parser.eat(TokenType.IDENTIFIER, "Expect parameter name."))
            if not parser.match(TokenType.COMMA):
                break
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

    parser.eat(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
    body = parser.block()
    return nodes.Function(name, tuple(params), body)


def parse_var_declaration(parser: 'Parser') -> nodes.Var:
    """
    Parse a `var` declaration with an optional initializer.

    Syntax:
        var <identifier> ( = <expression> )? ;
    """
    name = parser.eat(TokenType.IDENTIFIER, "Expect variable name.")

    initializer = None
    if parser.match(TokenType.EQUAL):
        initializer = parser.expr()

    parser.eat(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
    return nodes.Var(name, initializer)


def parse_statement(parser: 'Parser') -> nodes.Stmt:
    """
    Parse a single statement.
    """
    if parser.match(TokenType.FOR):
        return parse_for(parser)
    if parser.match(TokenType.IF):
        return parse_if(parser)
    if parser.match(TokenType.PRINT):
        return parse_print(parser)
    if parser.match(TokenType.RETURN):
        return parse_return(parser)
    if parser.match(TokenType.WHILE):
        return parse_while(parser)
    if parser.match(TokenType.LEFT_BRACE):
        return nodes.Block(parser.block())
    return parse_expression_statement(parser)


def parse_block(parser: 'Parser') -> tuple[nodes.Stmt, ...]:
    """
    Parse the declarations of a block up to its closing brace.

    Syntax:
        { <declaration>* }
    """
    statements = []
    while not parser.check(TokenType.RIGHT_BRACE) and not parser.is_at_end():
        stmt = parser.declaration()
        if stmt is not None:
            statements.append(stmt)
    parser.eat(TokenType.RIGHT_BRACE, "Expect '}' after block.")
    return tuple(statements)


def parse_for(parser: 'Parser') -> nodes.Stmt:
    """
    Parse a `for` loop and lower it into blocks and a `while`.

    ``for (init; cond; incr) body`` becomes
    ``{ init; while (cond) { body; incr; } }``; a missing condition is
    ``true`` and the outer block only exists when there is an initializer.

    Syntax:
        for ( ( <var_decl> | <expr_stmt> | ; ) <expression>? ; <expression>? ) <statement>
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

    if parser.match(TokenType.SEMICOLON):
        initializer = None
    elif parser.match(TokenType.VAR):
        initializer = parse_var_declaration(parser)
    else:
        initializer = parse_expression_statement(parser)

    condition = None
    if not parser.check(TokenType.SEMICOLON):
        condition = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after loop condition.")

    increment = None
    if not parser.check(TokenType.RIGHT_PAREN):
        increment = parser.expr()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

    body = parser.statement()

    if increment is not None:
        body = nodes.Block((body, nodes.Expression(increment)))
    if condition is None:
        condition = nodes.Literal(True)
    body = nodes.While(condition, body)
    if initializer is not None:
        body = nodes.Block((initializer, body))

    return body


def parse_if(parser: 'Parser') -> nodes.If:
    """
    Parse a conditional statement.

    The else clause is claimed eagerly, so in nested ifs it binds to the
    innermost one.

    Syntax:
        if ( <expression> ) <statement> ( else <statement> )?
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
    condition = parser.expr()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

    then_branch = parser.statement()
    else_branch = None
    if parser.match(TokenType.ELSE):
        else_branch = parser.statement()

    return nodes.If(condition, then_branch, else_branch)


def parse_print(parser: 'Parser') -> nodes.Print:
    """
    Parse a `print` statement.

    Syntax:
        print <expression> ;
    """
    value = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after value.")
    return nodes.Print(value)


def parse_return(parser: 'Parser') -> nodes.Return:
    """
    Parse a `return` statement with an optional value.

    Syntax:
        return <expression>? ;
    """
    keyword = parser.previous()
    value = None
    if not parser.check(TokenType.SEMICOLON):
        value = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after return value.")
    return nodes.Return(keyword, value)


def parse_while(parser: 'Parser') -> nodes.While:
    """
    Parse a `while` loop.

    Syntax:
        while ( <expression> ) <statement>
    """
    parser.eat(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
    condition = parser.expr()
    parser.eat(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
    body = parser.statement()
    return nodes.While(condition, body)


def parse_expression_statement(parser: 'Parser') -> nodes.Expression:
    """
    Parse an expression evaluated for its side effects.

    Syntax:
        <expression> ;
    """
    expr = parser.expr()
    parser.eat(TokenType.SEMICOLON, "Expect ';' after expression.")
    return nodes.Expression(expr)
