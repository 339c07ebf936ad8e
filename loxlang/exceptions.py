"""Errors.

Every diagnostic the pipeline can produce is a :class:`LoxError`. Lexical,
syntax and resolution errors are collected by their stage and reported
together; only :class:`LoxRuntimeError` is ever raised out of the
interpreter.


File: exceptions.py
Version: 0.1.0
License: MIT
"""


class LoxError(Exception):
    """
    Base class for all diagnostics, carrying the source line.
    """
    def __init__(self, message, line, where=""):
        self.message = message
        self.line = line
        self.where = where
        super().__init__(self.format())

    def format(self) -> str:
        """
        Render the diagnostic as a single line.
        """
        return f"[line {self.line}] Error{self.where}: {self.message}"


class ScanError(LoxError):
    """
    Error for malformed lexemes (unterminated strings, stray characters).
    """


class TokenError(LoxError):
    """
    Error reported against a specific token.
    """
    def __init__(self, token, message):
        self.token = token
        if token.type == 'EOF':
            where = " at end"
        else:
            where = f" at '{token.lexeme}'"
        super().__init__(message, token.line, where)


class ParseError(TokenError):
    """
    Error for unexpected or missing tokens.
    """


class ResolveError(TokenError):
    """
    Error for static binding problems found before execution.
    """


class LoxRuntimeError(TokenError):
    """
    Error raised while executing a program; fatal to the run.
    """
    def format(self) -> str:
        return f"[line {self.line}] Runtime Error{self.where}: {self.message}"


class UndefinedVariableException(LoxRuntimeError):
    """
    Error for undefined variables.
    """
    def __init__(self, name):
        self.varname = name.lexeme
        super().__init__(name, f"Undefined variable '{name.lexeme}'.")
