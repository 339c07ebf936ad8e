"""
Tests for running whole programs through every stage.
"""
import io

from loxlang.interpreter import Interpreter
from loxlang.pipeline import Outcome, raise_stack_limits, run_source
from loxlang.tests.utils import output_of


def run(source: str, interpreter: Interpreter | None = None):
    err = io.StringIO()
    outcome = run_source(source, interpreter, err=err)
    return outcome, err.getvalue().splitlines()


def test_successful_run(capsys):
    outcome, errors = run('print "hello";')
    assert outcome is Outcome.OK
    assert errors == []
    assert output_of(capsys) == ["hello"]


def test_exit_codes():
    assert Outcome.OK.exit_code == 0
    assert Outcome.STATIC_ERROR.exit_code == 65
    assert Outcome.RUNTIME_ERROR.exit_code == 70


def test_syntax_error_blocks_execution(capsys):
    outcome, errors = run("print 1;\nprint ;")
    assert outcome is Outcome.STATIC_ERROR
    assert errors == ["[line 2] Error at ';': Expect expression."]
    assert output_of(capsys) == []


def test_resolution_error_blocks_execution(capsys):
    outcome, errors = run("print 1;\nreturn 2;")
    assert outcome is Outcome.STATIC_ERROR
    assert errors == ["[line 2] Error at 'return': Can't return from top-level code."]
    assert output_of(capsys) == []


def test_lexical_and_syntax_errors_are_reported_together():
    """
    Test that lexing continues past bad characters so parsing can report too.
    """
    outcome, errors = run("@\nprint ;")
    assert outcome is Outcome.STATIC_ERROR
    assert errors == [
        "[line 1] Error: Unexpected character.",
        "[line 2] Error at ';': Expect expression.",
    ]


def test_resolution_is_skipped_after_syntax_errors():
    outcome, errors = run("print ;\nreturn 1;")
    assert outcome is Outcome.STATIC_ERROR
    assert errors == ["[line 1] Error at ';': Expect expression."]


def test_runtime_error_keeps_earlier_output(capsys):
    outcome, errors = run('print "before";\nprint 1 + nil;\nprint "after";')
    assert outcome is Outcome.RUNTIME_ERROR
    assert output_of(capsys) == ["before"]
    assert errors == [
        "[line 2] Runtime Error at '+': Operands must be two numbers or two strings."
    ]


def test_shared_interpreter_keeps_globals(capsys):
    """
    Test the REPL mode of use: each chunk sees what earlier chunks defined.
    """
    interpreter = Interpreter()
    assert run("var a = 1;", interpreter)[0] is Outcome.OK
    assert run("fun f() { return a; }", interpreter)[0] is Outcome.OK
    assert run("var a = a + 1;\nprint f();", interpreter)[0] is Outcome.OK
    assert output_of(capsys) == ["2"]


def test_session_survives_errors(capsys):
    interpreter = Interpreter()
    run("var a = 1;", interpreter)
    assert run("print a + nil;", interpreter)[0] is Outcome.RUNTIME_ERROR
    assert run("print ;", interpreter)[0] is Outcome.STATIC_ERROR
    assert run("print a;", interpreter)[0] is Outcome.OK
    assert output_of(capsys) == ["1"]


def test_end_to_end_program(capsys):
    source = (
        "// closures, classes and loops together\n"
        "class Accumulator {\n"
        "  init() { this.total = 0; }\n"
        "  add(n) { this.total = this.total + n; return this; }\n"
        "}\n"
        "fun range(n, each) {\n"
        "  for (var i = 1; i <= n; i = i + 1) each(i);\n"
        "}\n"
        "var acc = Accumulator();\n"
        "fun collect(i) { acc.add(i); }\n"
        "range(4, collect);\n"
        "print acc.total;\n"
    )
    outcome, errors = run(source)
    assert outcome is Outcome.OK
    assert errors == []
    assert output_of(capsys) == ["10"]


COUNT_DOWN = (
    "fun count(n) {\n"
    "  if (n > 0) return count(n - 1);\n"
    '  return "done";\n'
    "}\n"
)


def test_deep_recursion_runs(capsys):
    raise_stack_limits()
    outcome, errors = run(COUNT_DOWN + "print count(1000);")
    assert outcome is Outcome.OK
    assert errors == []
    assert output_of(capsys) == ["done"]


def test_deeply_nested_expression_runs(capsys):
    raise_stack_limits()
    depth = 200
    outcome, errors = run("print " + "(" * depth + "1" + ")" * depth + ";")
    assert outcome is Outcome.OK
    assert errors == []
    assert output_of(capsys) == ["1"]


def test_unbounded_recursion_is_a_runtime_error(capsys):
    """
    Test that running out of stack ends the run with one diagnostic.
    """
    raise_stack_limits()
    interpreter = Interpreter()
    outcome, errors = run('print "start";\nfun loop() { return loop(); }\nloop();', interpreter)
    assert outcome is Outcome.RUNTIME_ERROR
    assert errors == ["Stack overflow."]
    assert output_of(capsys) == ["start"]
    assert interpreter.environment is interpreter.globals
    assert run("print 1;", interpreter)[0] is Outcome.OK
