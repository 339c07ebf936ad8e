"""
Utility functions shared across loxlang tests.
"""
from loxlang.interpreter import Interpreter
from loxlang.lexer import tokenize
from loxlang.parser import Parser
from loxlang.resolver import Resolver


def parse_source(source: str):
    """
    Parse source code and return the AST, failing on any static error.
    """
    tokens, scan_errors = tokenize(source)
    assert scan_errors == []
    parser = Parser(tokens)
    statements = parser.parse()
    assert parser.errors == []
    return statements


def parse_with_errors(source: str):
    """
    Parse source code and return the AST together with the syntax errors.
    """
    tokens, _ = tokenize(source)
    parser = Parser(tokens)
    statements = parser.parse()
    return statements, parser.errors


def resolve_source(source: str):
    """
    Parse and resolve source code, returning the AST, the interpreter and the resolution errors.
    """
    statements = parse_source(source)
    interpreter = Interpreter()
    errors = Resolver(interpreter).resolve(statements)
    return statements, interpreter, errors


def execute_source(source: str, interpreter: Interpreter | None = None) -> Interpreter:
    """
    Run source code through every stage and return the interpreter instance after execution.
    """
    statements = parse_source(source)
    if interpreter is None:
        interpreter = Interpreter()
    errors = Resolver(interpreter).resolve(statements)
    assert errors == []
    interpreter.interpret(statements)
    return interpreter


def output_of(capsys) -> list[str]:
    """
    Return the captured stdout lines.
    """
    return capsys.readouterr().out.splitlines()
