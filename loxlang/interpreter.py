"""Interpreter.

This is a tree-walk interpreter for evaluating AST nodes produced by the parser
and annotated by the resolver. It supports arithmetic, variables, closures,
conditionals, loops, classes and output statements.

1. Execution Model
Statements are executed via `execute()` and expressions are evaluated via
`eval_expr()`; both dispatch on the node class with `match`. `execute()`
returns ``None`` when a statement completes normally and a `ReturnSignal`
when a `return` ran. Blocks and loops hand a signal straight back to their
caller, and only a function call consumes it, so `return` never looks like
an error.

2. Environment
`self.environment` is the innermost scope of the code currently running and
`self.globals` the outermost. Every block and every call runs in a fresh
child environment, and the previous one is always restored afterwards.

3. Variable Lookup
The resolver fills `self.locals` with the hop count for each local
reference. References without an entry are globals and are looked up by
name in `self.globals`.

4. Error Handling
Runtime errors (bad operand types, undefined variables or properties,
calling a non-callable, wrong arity) raise `LoxRuntimeError` carrying the
offending token. Output already printed stays printed.


File: interpreter.py
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

import logging
import math
import sys
from typing import Any, Callable, Iterable, TextIO

from loxlang.environment import Environment
from loxlang.exceptions import LoxRuntimeError
from loxlang.lexer import Token, TokenType
from loxlang.runtime import (
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    NativeFunction,
    ReturnSignal,
)
from loxlang import nodes

logger = logging.getLogger(__name__)


def is_truthy(value: Any) -> bool:
    """
    Only ``nil`` and ``false`` are falsy.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: Any, right: Any) -> bool:
    """
    Value equality for nil, booleans, numbers and strings; identity otherwise.

    Types never coerce, so ``true`` is not equal to ``1``.
    """
    if left is None or right is None:
        return left is None and right is None
    if type(left) is not type(right):
        return False
    if isinstance(left, (bool, float, str)):
        return left == right
    return left is right


def stringify(value: Any) -> str:
    """
    Convert a runtime value into its printed form.
    """
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


class Interpreter:
    """Tree-walk interpreter for loxlang."""

    def __init__(self, out: TextIO | None = None):
        """Initialize the interpreter with an empty global environment."""
        self.globals = Environment()
        self.environment = self.globals
        self.locals: dict[nodes.Expr, int] = {}
        self.out = out

    def define_native(self, name: str, arity: int, function: Callable[..., Any]) -> None:
        """
        Expose a Python callable to scripts as the global ``name``.
        """
        self.globals.define(name, NativeFunction(name, arity, function))

    def resolve(self, expr: nodes.Expr, depth: int) -> None:
        """
        Record the binding depth of a local reference.

        The first depth recorded for a node wins, so resolving the same
        program again leaves the table unchanged.
        """
        self.locals.setdefault(expr, depth)

    def interpret(self, statements: Iterable[nodes.Stmt]) -> None:
        """
        Execute a resolved program.

        Raises:
            LoxRuntimeError: On the first runtime error; execution stops there.
        """
        for stmt in statements:
            self.execute(stmt)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def execute_block(self, statements: Iterable[nodes.Stmt], environment: Environment) -> ReturnSignal | None:
        """
        Run ``statements`` inside ``environment``, restoring the current one afterwards.
        """
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    def execute(self, stmt: nodes.Stmt) -> ReturnSignal | None:
        """
        Execute one statement.

        Returns:
            ReturnSignal | None: A signal if a `return` ran, else None.
        """
        match stmt:
            case nodes.Expression(expression=expression):
                self.eval_expr(expression)

            case nodes.Print(expression=expression):
                value = self.eval_expr(expression)
                print(stringify(value), file=self.out or sys.stdout)

            case nodes.Var(name=name, initializer=initializer):
                value = None
                if initializer is not None:
                    value = self.eval_expr(initializer)
                self.environment.define(name.lexeme, value)

            case nodes.Block(statements=statements):
                return self.execute_block(statements, Environment(self.environment))

            case nodes.If(condition=condition, then_branch=then_branch, else_branch=else_branch):
                if is_truthy(self.eval_expr(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)

            case nodes.While(condition=condition, body=body):
                while is_truthy(self.eval_expr(condition)):
                    signal = self.execute(body)
                    if signal is not None:
                        return signal

            case nodes.Function(name=name):
                function = LoxFunction(stmt, self.environment)
                self.environment.define(name.lexeme, function)

            case nodes.Return(value=value):
                result = None
                if value is not None:
                    result = self.eval_expr(value)
                return ReturnSignal(result)

            case nodes.Class(name=name, methods=declarations):
                self.environment.define(name.lexeme, None)
                methods = {
                    method.name.lexeme: LoxFunction(
                        method, self.environment, method.name.lexeme == "init"
                    )
                    for method in declarations
                }
                self.environment.assign(name, LoxClass(name.lexeme, methods))

            case _:
                raise TypeError(f"Unknown statement type: {type(stmt).__name__}")

        return None

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def look_up_variable(self, name: Token, expr: nodes.Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    def eval_expr(self, expr: nodes.Expr) -> Any:
        """
        Recursively evaluate an expression node and return its computed value.

        Raises:
            LoxRuntimeError: For type errors, undefined names and bad calls.
        """
        match expr:
            case nodes.Literal(value=value):
                return value

            case nodes.Grouping(expression=expression):
                return self.eval_expr(expression)

            case nodes.Variable(name=name):
                return self.look_up_variable(name, expr)

            case nodes.This(keyword=keyword):
                return self.look_up_variable(keyword, expr)

            case nodes.Assign(name=name, value=value_expr):
                value = self.eval_expr(value_expr)
                distance = self.locals.get(expr)
                if distance is not None:
                    self.environment.assign_at(distance, name, value)
                else:
                    self.globals.assign(name, value)
                return value

            case nodes.Logical(left=left, operator=operator, right=right):
                lhs = self.eval_expr(left)
                if operator.type == TokenType.OR:
                    if is_truthy(lhs):
                        return lhs
                elif not is_truthy(lhs):
                    return lhs
                return self.eval_expr(right)

            case nodes.Unary(operator=operator, right=right):
                operand = self.eval_expr(right)
                match operator.type:
                    case TokenType.BANG:
                        return not is_truthy(operand)
                    case TokenType.MINUS:
                        self.check_number_operand(operator, operand)
                        return -operand
                raise LoxRuntimeError(operator, "Unknown unary operator.")

            case nodes.Binary(left=left, operator=operator, right=right):
                return self.eval_binary(operator, self.eval_expr(left), self.eval_expr(right))

            case nodes.Call(callee=callee_expr, paren=paren, arguments=argument_exprs):
                callee = self.eval_expr(callee_expr)
                arguments = [self.eval_expr(argument) for argument in argument_exprs]

                if not isinstance(callee, LoxCallable):
                    raise LoxRuntimeError(paren, "Can only call functions and classes.")
                if len(arguments) != callee.arity():
                    raise LoxRuntimeError(
                        paren,
                        f"Expected {callee.arity()} arguments but got {len(arguments)}.",
                    )
                return callee.call(self, arguments, paren)

            case nodes.Get(object=object_expr, name=name):
                target = self.eval_expr(object_expr)
                if isinstance(target, LoxInstance):
                    return target.get(name)
                raise LoxRuntimeError(name, "Only instances have properties.")

            case nodes.Set(object=object_expr, name=name, value=value_expr):
                target = self.eval_expr(object_expr)
                if not isinstance(target, LoxInstance):
                    raise LoxRuntimeError(name, "Only instances have fields.")
                value = self.eval_expr(value_expr)
                target.set(name, value)
                return value

        raise TypeError(f"Unknown expression type: {type(expr).__name__}")

    def eval_binary(self, operator: Token, lhs: Any, rhs: Any) -> Any:
        match operator.type:
            # Arithmetic
            case TokenType.PLUS:
                if isinstance(lhs, float) and isinstance(rhs, float):
                    return lhs + rhs
                if isinstance(lhs, str) and isinstance(rhs, str):
                    return lhs + rhs
                raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")
            case TokenType.MINUS:
                self.check_number_operands(operator, lhs, rhs)
                return lhs - rhs
            case TokenType.STAR:
                self.check_number_operands(operator, lhs, rhs)
                return lhs * rhs
            case TokenType.SLASH:
                self.check_number_operands(operator, lhs, rhs)
                return divide(lhs, rhs)
            # Comparison
            case TokenType.GREATER:
                self.check_number_operands(operator, lhs, rhs)
                return lhs > rhs
            case TokenType.GREATER_EQUAL:
                self.check_number_operands(operator, lhs, rhs)
                return lhs >= rhs
            case TokenType.LESS:
                self.check_number_operands(operator, lhs, rhs)
                return lhs < rhs
            case TokenType.LESS_EQUAL:
                self.check_number_operands(operator, lhs, rhs)
                return lhs <= rhs
            # Equality
            case TokenType.EQUAL_EQUAL:
                return is_equal(lhs, rhs)
            case TokenType.BANG_EQUAL:
                return not is_equal(lhs, rhs)
        raise LoxRuntimeError(operator, "Unknown binary operator.")

    @staticmethod
    def check_number_operand(operator: Token, operand: Any) -> None:
        if isinstance(operand, float):
            return
        raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def check_number_operands(operator: Token, lhs: Any, rhs: Any) -> None:
        if isinstance(lhs, float) and isinstance(rhs, float):
            return
        raise LoxRuntimeError(operator, "Operands must be numbers.")


def divide(lhs: float, rhs: float) -> float:
    """
    Divide with IEEE semantics: ``x / 0`` is an infinity or NaN, never an error.
    """
    if rhs == 0.0:
        if lhs == 0.0 or math.isnan(lhs):
            return math.nan
        # The sign of a zero divisor still matters: 1 / -0 is -inf.
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs
