"""
loxlang Interpreter

This is the main entry point for the loxlang interpreter.

Workflow:
1. The source script is read from the file specified on the command line.
2. The Lexer tokenizes the source code into meaningful tokens.
3. The Parser processes tokens into an AST following the language grammar.
4. The Resolver binds every local variable reference to its scope.
5. The Interpreter walks the AST, evaluating expressions and executing statements.

Exit codes follow sysexits: 64 usage, 65 static error, 66 unreadable
input, 70 runtime error.
"""
import argparse
import logging
import os
import sys

from loxlang.interpreter import Interpreter
from loxlang.lexer import TokenType, tokenize
from loxlang.parser import Parser
from loxlang.pipeline import STACK_OVERFLOW, Outcome, raise_stack_limits, report, run_source
from loxlang.printer import format_stmt

EX_USAGE = 64
EX_NOINPUT = 66

COMMANDS = ("tokenize", "parse", "run")

logger = logging.getLogger("lox")


def build_arg_parser() -> argparse.ArgumentParser:
    """
    Build the command line parser.
    """
    arg_parser = argparse.ArgumentParser(
        prog="lox",
        description="loxlang interpreter. Run with no arguments to enter interactive mode (REPL).",
        epilog="Set LOXDEBUG=1 to dump tokens and the AST while running.",
    )
    arg_parser.add_argument(
        "args",
        nargs="*",
        metavar="[command] script",
        help=f"a script to run, optionally preceded by one of: {', '.join(COMMANDS)}",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="enable debug logging",
    )
    return arg_parser


def configure_logging(verbose: bool) -> None:
    """
    Send log records to stderr; debug level when asked for.
    """
    level = logging.DEBUG if verbose or os.environ.get("LOXDEBUG") else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)


def read_source(script_name: str) -> str | None:
    """
    Read a script, reporting unreadable files instead of raising.
    """
    try:
        with open(script_name, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        print(f"Could not read '{script_name}': {e.strerror}", file=sys.stderr)
        return None


def run_tokenize(source: str) -> int:
    """
    Print one token per line.
    """
    tokens, errors = tokenize(source)
    report(errors)
    for token in tokens:
        print(token)
    return Outcome.STATIC_ERROR.exit_code if errors else 0


def run_parse(source: str) -> int:
    """
    Print the parsed statements in prefix form.
    """
    tokens, scan_errors = tokenize(source)
    parser = Parser(tokens)
    try:
        statements = parser.parse()
    except RecursionError:
        print(STACK_OVERFLOW, file=sys.stderr)
        return Outcome.RUNTIME_ERROR.exit_code
    errors = [*scan_errors, *parser.errors]
    if errors:
        report(errors)
        return Outcome.STATIC_ERROR.exit_code
    for stmt in statements:
        print(format_stmt(stmt))
    return 0


def run_script(script_name: str, command: str = "run") -> int:
    """
    Run a loxlang script and return the process exit code.
    """
    source = read_source(script_name)
    if source is None:
        return EX_NOINPUT

    logger.debug("%s %s", command, script_name)
    if command == "tokenize":
        return run_tokenize(source)
    if command == "parse":
        return run_parse(source)
    return run_source(source, file=script_name).exit_code


def is_incomplete(source: str) -> bool:
    """
    True when the only syntax errors are at end of input, i.e. more lines are expected.
    """
    tokens, scan_errors = tokenize(source)
    if scan_errors:
        return False
    parser = Parser(tokens)
    try:
        parser.parse()
    except RecursionError:
        return False
    return bool(parser.errors) and all(e.token.type == TokenType.EOF for e in parser.errors)


def run_repl() -> int:
    """
    Run the interactive REPL
    """
    print("loxlang Interpreter - REPL")
    print("Type `exit` or `quit` to leave.")
    interpreter = Interpreter()
    buffer: list[str] = []
    while True:
        try:
            prompt = "> " if not buffer else "... "
            line = input(prompt)
        except KeyboardInterrupt:
            print("\nInterrupted.")
            break
        except EOFError:
            print()
            break

        if not buffer and line.strip() in {"exit", "quit"}:
            break
        buffer.append(line)
        source = "\n".join(buffer)
        if is_incomplete(source):
            continue
        run_source(source, interpreter, file="<stdin>")
        buffer.clear()
    return 0


def main(argv: list[str]) -> int:
    """
    Entry point for the CLI.

    Behaviour:
    - No arguments: enter the REPL.
    - One argument: treat it as the path to a script and run it.
    - A command (tokenize, parse, run) followed by a script path: run that stage.
    - Any other pattern: print usage and return a non-zero exit code.
    """
    arg_parser = build_arg_parser()
    options = arg_parser.parse_args(argv[1:])
    configure_logging(options.verbose)
    raise_stack_limits()

    args = options.args
    if not args:
        return run_repl()
    if len(args) == 1:
        return run_script(args[0])
    if len(args) == 2 and args[0] in COMMANDS:
        return run_script(args[1], args[0])
    arg_parser.print_usage(sys.stderr)
    return EX_USAGE


def cli() -> None:
    """
    Console script entry point.
    """
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    cli()
