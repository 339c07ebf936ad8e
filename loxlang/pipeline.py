"""Pipeline runner.

Chains the stages over one source text: lex fully, parse fully, resolve
fully, then evaluate. Every stage runs to completion before the next one
starts. Static diagnostics from the first three stages are reported
together and block evaluation; a runtime error stops evaluation and is
reported on its own.

Workflow:
1. The Lexer tokenizes the source, collecting lexical errors.
2. The Parser builds the AST, collecting syntax errors.
3. The Resolver computes binding depths, collecting resolution errors.
4. The Interpreter walks the AST, printing output as it goes.


File: pipeline.py
Version: 0.1.0
License: MIT
"""

import logging
import sys
from enum import Enum
from typing import TextIO

try:
    import resource
except ImportError:  # not available on Windows
    resource = None

from loxlang.exceptions import LoxError, LoxRuntimeError
from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.printer import format_stmt
from loxlang.resolver import Resolver

logger = logging.getLogger(__name__)

STACK_OVERFLOW = "Stack overflow."

# Python frames allowed while running a program. Each script call costs a
# handful of frames and each nesting level of an expression a few dozen.
RECURSION_LIMIT = 20_000

# Rough C stack use of one Python frame.
FRAME_STACK_BYTES = 500


class Outcome(str, Enum):
    """
    Result of running a program, mapped to an exit code by the driver.
    """

    OK = "ok"
    STATIC_ERROR = "static error"
    RUNTIME_ERROR = "runtime error"

    @property
    def exit_code(self) -> int:
        return {Outcome.OK: 0, Outcome.STATIC_ERROR: 65, Outcome.RUNTIME_ERROR: 70}[self]


def report(errors: list[LoxError], err: TextIO | None = None) -> None:
    """
    Write one line per diagnostic to the error channel.
    """
    stream = err or sys.stderr
    for error in errors:
        print(error.format(), file=stream)


def run_source(
    source: str,
    interpreter: Interpreter | None = None,
    file: str = "<script>",
    err: TextIO | None = None,
) -> Outcome:
    """
    Run a program through the whole pipeline.

    Every stage recurses over the program's nesting, and evaluation also
    recurses once per script call. Running out of Python stack in any of
    them is reported as a single ``Stack overflow.`` runtime error.

    Parameters:
        source (str): The program text.
        interpreter (Interpreter): Reused to keep globals alive across
            calls (the REPL); a fresh one is created when omitted.
        file (str): Script name used in debug logging.
        err (TextIO): Error channel, stderr by default.

    Returns:
        Outcome: How the run ended.
    """
    if interpreter is None:
        interpreter = Interpreter()

    try:
        return _run_stages(source, interpreter, file, err)
    except RecursionError:
        logger.debug("%s: recursion limit %d reached", file, sys.getrecursionlimit())
        print(STACK_OVERFLOW, file=err or sys.stderr)
        return Outcome.RUNTIME_ERROR


def _run_stages(source: str, interpreter: Interpreter, file: str, err: TextIO | None) -> Outcome:
    tokens, scan_errors = tokenize(source)
    parser = Parser(tokens)
    statements = parser.parse()

    static_errors: list[LoxError] = [*scan_errors, *parser.errors]
    if not static_errors:
        resolver = Resolver(interpreter)
        static_errors.extend(resolver.resolve(statements))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%s: tokens %s", file, tokens)
        for stmt in statements:
            logger.debug("%s: ast %s", file, format_stmt(stmt))

    if static_errors:
        static_errors.sort(key=lambda e: e.line)
        report(static_errors, err)
        return Outcome.STATIC_ERROR

    try:
        interpreter.interpret(statements)
    except LoxRuntimeError as e:
        report([e], err)
        return Outcome.RUNTIME_ERROR
    return Outcome.OK


def raise_stack_limits(limit: int = RECURSION_LIMIT) -> None:
    """
    Let deeply recursive programs use the host stack instead of Python's
    default recursion limit.

    The process stack limit is raised to match where the platform allows.
    """
    if sys.getrecursionlimit() < limit:
        sys.setrecursionlimit(limit)
    if resource is None:
        return

    soft, hard = resource.getrlimit(resource.RLIMIT_STACK)
    wanted = limit * FRAME_STACK_BYTES
    if hard != resource.RLIM_INFINITY:
        wanted = min(wanted, hard)
    if soft != resource.RLIM_INFINITY and soft < wanted:
        resource.setrlimit(resource.RLIMIT_STACK, (wanted, hard))
        logger.debug("stack limit raised from %d to %d bytes", soft, wanted)
