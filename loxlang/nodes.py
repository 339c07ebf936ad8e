"""AST node definitions.

Expressions and statements are immutable dataclasses consumed with
``match`` statements by the resolver, the interpreter and the printer.
Nodes compare and hash by identity, which is what the interpreter's
resolution table is keyed on: two references to ``a`` on the same line
are still two distinct entries.


File: nodes.py
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from loxlang.lexer import Token


node = dataclass(frozen=True, eq=False)


# ---- Expressions ----

@node
class Literal:
    value: Any


@node
class Grouping:
    expression: Expr


@node
class Unary:
    operator: Token
    right: Expr


@node
class Binary:
    left: Expr
    operator: Token
    right: Expr


@node
class Logical:
    left: Expr
    operator: Token
    right: Expr


@node
class Variable:
    name: Token


@node
class Assign:
    name: Token
    value: Expr


@node
class Call:
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@node
class Get:
    object: Expr
    name: Token


@node
class Set:
    object: Expr
    name: Token
    value: Expr


@node
class This:
    keyword: Token


Expr = Union[
    Literal, Grouping, Unary, Binary, Logical, Variable, Assign, Call, Get, Set, This
]


# ---- Statements ----

@node
class Expression:
    expression: Expr


@node
class Print:
    expression: Expr


@node
class Var:
    name: Token
    initializer: Optional[Expr]


@node
class Block:
    statements: tuple[Stmt, ...]


@node
class If:
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@node
class While:
    condition: Expr
    body: Stmt


@node
class Function:
    """Declaration and, at runtime, the template for a callable."""
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@node
class Return:
    keyword: Token
    value: Optional[Expr]


@node
class Class:
    name: Token
    methods: tuple[Function, ...]


Stmt = Union[Expression, Print, Var, Block, If, While, Function, Return, Class]
