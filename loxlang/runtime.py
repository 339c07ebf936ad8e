"""Runtime values.

Besides the plain Python values that stand in for nil (``None``), booleans,
numbers (``float``) and strings, a running program handles the objects
defined here: callables (user functions, host natives and classes) and
class instances. All of them compare by identity.


File: runtime.py
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from loxlang.environment import Environment
from loxlang.exceptions import LoxRuntimeError
from loxlang.lexer import Token
from loxlang import nodes

if TYPE_CHECKING:
    from loxlang.interpreter import Interpreter


@dataclass(frozen=True)
class ReturnSignal:
    """
    Result of executing a `return`: carried up through blocks and loops
    until the enclosing call consumes it.
    """
    value: Any


class LoxCallable:
    """Base for every value that can appear before ``(...)``."""

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: Interpreter, arguments: list[Any], paren: Token) -> Any:
        """
        Run the callable. ``paren`` is the closing parenthesis of the call,
        used to place runtime errors.
        """
        raise NotImplementedError


class LoxFunction(LoxCallable):
    """Runtime representation of a function value."""

    def __init__(self, declaration: nodes.Function, closure: Environment, is_initializer=False):
        self.declaration = declaration
        # Environment active where the function was declared.
        self.closure = closure
        self.is_initializer = is_initializer

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """
        Return a copy of this method whose closure defines ``this``.
        """
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: Interpreter, arguments: list[Any], paren: Token) -> Any:
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if signal is not None:
            return signal.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.declaration.name.lexeme}>"


class NativeFunction(LoxCallable):
    """A host-provided Python callable exposed to scripts."""

    def __init__(self, name: str, arity: int, function: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: Interpreter, arguments: list[Any], paren: Token) -> Any:
        try:
            return self.function(*arguments)
        except LoxRuntimeError:
            raise
        except Exception as e:
            raise LoxRuntimeError(
                paren, f"Native function '{self.name}' failed: {type(e).__name__}: {e}"
            ) from e

    def __str__(self) -> str:
        return "<native fn>"


class LoxClass(LoxCallable):
    """A class declaration; calling it creates an instance."""

    def __init__(self, name: str, methods: dict[str, LoxFunction]):
        self.name = name
        self.methods = methods

    def find_method(self, name: str) -> LoxFunction | None:
        return self.methods.get(name)

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: Interpreter, arguments: list[Any], paren: Token) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments, paren)
        return instance

    def __str__(self) -> str:
        return self.name


class LoxInstance:
    """An object with dynamic fields, backed by its class for methods."""

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        """
        Read a property: fields first, then methods bound to this instance.

        Raises:
            LoxRuntimeError: If neither a field nor a method has the name.
        """
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __str__(self) -> str:
        return f"{self.klass.name} instance"
