"""
Tests for conditionals, logical operators and loops.
"""
import pytest

from loxlang.exceptions import UndefinedVariableException
from loxlang.tests.utils import execute_source, output_of


def test_if_else(capsys):
    source = (
        "var a = 3;\n"
        'if (a > 2) print "big"; else print "small";\n'
        'if (a > 5) print "huge"; else print "not huge";\n'
        'if (a == 3) { print "three"; }\n'
    )
    execute_source(source)
    assert output_of(capsys) == ["big", "not huge", "three"]


def test_logical_operators_return_an_operand(capsys):
    source = (
        'print nil or "default";\n'
        'print "first" or "second";\n'
        'print "a" and "b";\n'
        "print false and 1;\n"
        "print nil and 1;\n"
    )
    execute_source(source)
    assert output_of(capsys) == ["default", "first", "b", "false", "nil"]


def test_logical_operators_short_circuit(capsys):
    """
    Test that the right operand is never evaluated once the result is known.
    """
    execute_source("print false and missing; print true or missing();")
    assert output_of(capsys) == ["false", "true"]


def test_and_binds_tighter_than_or(capsys):
    execute_source("print true or false and false; print (true or false) and false;")
    assert output_of(capsys) == ["true", "false"]


def test_while_loop(capsys):
    execute_source("var i = 0; while (i < 3) { print i; i = i + 1; }")
    assert output_of(capsys) == ["0", "1", "2"]


def test_for_loop_matches_equivalent_while(capsys):
    execute_source("for (var i = 0; i < 3; i = i + 1) print i;")
    for_output = output_of(capsys)
    execute_source("{ var i = 0; while (i < 3) { print i; i = i + 1; } }")
    assert for_output == output_of(capsys) == ["0", "1", "2"]


def test_for_initializer_is_scoped_to_the_loop(capsys):
    with pytest.raises(UndefinedVariableException) as excinfo:
        execute_source("for (var i = 0; i < 1; i = i + 1) print i;\nprint i;")
    assert output_of(capsys) == ["0"]
    assert excinfo.value.line == 2


def test_for_with_existing_variable(capsys):
    execute_source("var i = 10; for (i = 0; i < 2; i = i + 1) {} print i;")
    assert output_of(capsys) == ["2"]


def test_for_without_initializer_or_increment(capsys):
    execute_source("var n = 3; for (; n > 0;) { print n; n = n - 1; }")
    assert output_of(capsys) == ["3", "2", "1"]


def test_loop_body_gets_a_fresh_scope_each_iteration(capsys):
    source = (
        "var i = 0;\n"
        "while (i < 2) {\n"
        "  var inner = i * 10;\n"
        "  print inner;\n"
        "  i = i + 1;\n"
        "}\n"
    )
    execute_source(source)
    assert output_of(capsys) == ["0", "10"]


def test_return_breaks_out_of_nested_loops(capsys):
    source = (
        "fun first() {\n"
        "  for (var i = 0; i < 10; i = i + 1) {\n"
        "    while (true) {\n"
        "      if (i == 0) return i;\n"
        "    }\n"
        "  }\n"
        '  print "unreachable";\n'
        "}\n"
        "print first();\n"
    )
    execute_source(source)
    assert output_of(capsys) == ["0"]
