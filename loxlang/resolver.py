"""Resolver.

A static pass that runs once over the whole program before anything is
executed. It has two jobs:

1. Binding depths
For every variable reference, assignment target and ``this`` that binds in
a local scope, it tells the interpreter how many enclosing environments to
walk from the point of use to reach the declaring scope. Names that are not
found in any local scope are left alone and treated as globals at run time.

2. Static errors
Duplicate declarations in one local scope, reading a variable inside its
own initializer, ``return`` outside a function, returning a value from an
initializer and ``this`` outside a class are reported here. Errors are
collected rather than raised so every one of them is reported in one run.

Scopes are tracked as a stack of ``name -> ready`` dicts. A name maps to
False between its declaration and the end of its initializer.


File: resolver.py
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from loxlang.exceptions import ResolveError
from loxlang.lexer import Token
from loxlang import nodes

if TYPE_CHECKING:
    from loxlang.interpreter import Interpreter

logger = logging.getLogger(__name__)


class FunctionType(Enum):
    NONE = "none"
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"


class ClassType(Enum):
    NONE = "none"
    CLASS = "class"


class Resolver:
    """Static scope analysis feeding the interpreter's resolution table."""

    def __init__(self, interpreter: Interpreter):
        self.interpreter = interpreter
        self.scopes: list[dict[str, bool]] = []
        # Top-level names, tracked only to catch `var a = a;` at global scope.
        self.globals: dict[str, bool] = {name: True for name in interpreter.globals.values}
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.errors: list[ResolveError] = []

    @property
    def had_error(self) -> bool:
        """
        True once any resolution error has been reported.
        """
        return bool(self.errors)

    def error(self, token: Token, message: str) -> None:
        self.errors.append(ResolveError(token, message))

    def resolve(self, statements: Iterable[nodes.Stmt]) -> list[ResolveError]:
        """
        Resolve a whole program.

        Returns:
            list[ResolveError]: Every static error found.
        """
        for stmt in statements:
            self.resolve_stmt(stmt)
        logger.debug(
            "resolved %d local references with %d errors",
            len(self.interpreter.locals),
            len(self.errors),
        )
        return self.errors

    # ------------------------------------------------------------------
    # Scope bookkeeping
    # ------------------------------------------------------------------

    def begin_scope(self) -> None:
        self.scopes.append({})

    def end_scope(self) -> None:
        self.scopes.pop()

    def declare(self, name: Token) -> None:
        """
        Add ``name`` to the innermost scope as declared but not yet ready.
        """
        if not self.scopes:
            self.globals.setdefault(name.lexeme, False)
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name: Token) -> None:
        """
        Mark ``name`` in the innermost scope as ready for use.
        """
        if not self.scopes:
            self.globals[name.lexeme] = True
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr: nodes.Expr, name: Token) -> None:
        """
        Record the hop count from the innermost scope to the one declaring ``name``.
        """
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return

    def resolve_function(self, function: nodes.Function, function_type: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = function_type

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        for stmt in function.body:
            self.resolve_stmt(stmt)
        self.end_scope()

        self.current_function = enclosing_function

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def resolve_stmt(self, stmt: nodes.Stmt) -> None:
        match stmt:
            case nodes.Block(statements=statements):
                self.begin_scope()
                for inner in statements:
                    self.resolve_stmt(inner)
                self.end_scope()

            case nodes.Class(name=name, methods=methods):
                enclosing_class = self.current_class
                self.current_class = ClassType.CLASS

                self.declare(name)
                self.define(name)

                self.begin_scope()
                self.scopes[-1]["this"] = True
                for method in methods:
                    if method.name.lexeme == "init":
                        function_type = FunctionType.INITIALIZER
                    else:
                        function_type = FunctionType.METHOD
                    self.resolve_function(method, function_type)
                self.end_scope()

                self.current_class = enclosing_class

            case nodes.Expression(expression=expression) | nodes.Print(expression=expression):
                self.resolve_expr(expression)

            case nodes.Function(name=name):
                # Defined before the body so the function can call itself.
                self.declare(name)
                self.define(name)
                self.resolve_function(stmt, FunctionType.FUNCTION)

            case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                self.resolve_expr(condition)
                self.resolve_stmt(then_branch)
                if else_branch is not None:
                    self.resolve_stmt(else_branch)

            case nodes.Return(keyword=keyword, value=value):
                if self.current_function == FunctionType.NONE:
                    self.error(keyword, "Can't return from top-level code.")
                if value is not None:
                    if self.current_function == FunctionType.INITIALIZER:
                        self.error(keyword, "Can't return a value from an initializer.")
                    self.resolve_expr(value)

            case nodes.Var(name=name, initializer=initializer):
                self.declare(name)
                if initializer is not None:
                    self.resolve_expr(initializer)
                self.define(name)

            case nodes.While(condition=condition, body=body):
                self.resolve_expr(condition)
                self.resolve_stmt(body)

            case _:
                raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def resolve_expr(self, expr: nodes.Expr) -> None:
        match expr:
            case nodes.Variable(name=name):
                if self.scopes:
                    ready = self.scopes[-1].get(name.lexeme)
                else:
                    ready = self.globals.get(name.lexeme)
                if ready is False:
                    self.error(name, "Can't read local variable in its own initializer.")
                self.resolve_local(expr, name)

            case nodes.Assign(name=name, value=value):
                self.resolve_expr(value)
                self.resolve_local(expr, name)

            case nodes.Binary(left=left, right=right) | nodes.Logical(left=left, right=right):
                self.resolve_expr(left)
                self.resolve_expr(right)

            case nodes.Call(callee=callee, arguments=arguments):
                self.resolve_expr(callee)
                for argument in arguments:
                    self.resolve_expr(argument)

            case nodes.Get(object=obj):
                # Property names are looked up dynamically.
                self.resolve_expr(obj)

            case nodes.Set(object=obj, value=value):
                self.resolve_expr(value)
                self.resolve_expr(obj)

            case nodes.This(keyword=keyword):
                if self.current_class == ClassType.NONE:
                    self.error(keyword, "Can't use 'this' outside of a class.")
                    return
                self.resolve_local(expr, keyword)

            case nodes.Grouping(expression=expression):
                self.resolve_expr(expression)

            case nodes.Unary(right=right):
                self.resolve_expr(right)

            case nodes.Literal():
                pass

            case _:
                raise TypeError(f"Unknown expression type: {type(expr).__name__}")
