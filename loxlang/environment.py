"""Environment chain.

An :class:`Environment` maps names to values and links to the environment
that encloses it. The global environment is the only one without an
enclosing link. Blocks and calls each get a fresh child; a call's child
hangs off the function's captured closure rather than the caller's
environment, which is what makes scoping lexical.

Closures may keep an environment alive long after the block that created
it has finished. Python's reference counting handles that for us, so the
link is an ordinary attribute.


File: environment.py
Version: 0.1.0
License: MIT
"""

from __future__ import annotations

from typing import Any

from loxlang.exceptions import UndefinedVariableException
from loxlang.lexer import Token


class Environment:
    """A single scope of name bindings."""

    def __init__(self, enclosing: Environment | None = None):
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """
        Bind ``name`` in this scope, replacing any existing binding here.
        """
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Look ``name`` up in this scope and then outward.

        Raises:
            UndefinedVariableException: If no scope in the chain binds it.
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise UndefinedVariableException(name)

    def assign(self, name: Token, value: Any) -> None:
        """
        Rebind an existing ``name`` in the nearest scope that has it.

        Raises:
            UndefinedVariableException: If no scope in the chain binds it.
        """
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise UndefinedVariableException(name)

    def ancestor(self, distance: int) -> Environment:
        """
        Return the environment ``distance`` links up the chain.
        """
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance: int, name: str) -> Any:
        """
        Read ``name`` from exactly ``distance`` hops up, as resolved statically.
        """
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        """
        Write ``name`` exactly ``distance`` hops up, as resolved statically.
        """
        self.ancestor(distance).values[name.lexeme] = value

    def __repr__(self) -> str:
        depth = 0
        environment = self.enclosing
        while environment is not None:
            depth += 1
            environment = environment.enclosing
        return f"Environment(depth={depth}, names={sorted(self.values)})"
