"""
Tests for the lox command line driver.
"""
import lox


def write_script(tmp_path, source: str) -> str:
    path = tmp_path / "script.lox"
    path.write_text(source, encoding="utf-8")
    return str(path)


def test_run_script(tmp_path, capsys):
    script = write_script(tmp_path, 'print "hi";\nprint 1 + 1;\n')
    assert lox.main(["lox", script]) == 0
    assert capsys.readouterr().out.splitlines() == ["hi", "2"]


def test_run_command_is_the_default(tmp_path, capsys):
    script = write_script(tmp_path, "print 3;")
    assert lox.main(["lox", "run", script]) == 0
    assert capsys.readouterr().out.splitlines() == ["3"]


def test_tokenize_command(tmp_path, capsys):
    script = write_script(tmp_path, "var a = 1;")
    assert lox.main(["lox", "tokenize", script]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "VAR var null",
        "IDENTIFIER a null",
        "EQUAL = null",
        "NUMBER 1 1.0",
        "SEMICOLON ; null",
        "EOF  null",
    ]


def test_tokenize_reports_errors_but_still_prints(tmp_path, capsys):
    script = write_script(tmp_path, "@1")
    assert lox.main(["lox", "tokenize", script]) == 65
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["NUMBER 1 1.0", "EOF  null"]
    assert "[line 1] Error: Unexpected character." in captured.err


def test_parse_command(tmp_path, capsys):
    script = write_script(tmp_path, "print 1 + 2 * 3;\nvar x;")
    assert lox.main(["lox", "parse", script]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "(print (+ 1.0 (* 2.0 3.0)))",
        "(var x)",
    ]


def test_parse_command_syntax_error(tmp_path, capsys):
    script = write_script(tmp_path, "print (1;")
    assert lox.main(["lox", "parse", script]) == 65
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[line 1] Error at ';': Expect ')' after expression." in captured.err


def test_static_error_exit_code(tmp_path, capsys):
    script = write_script(tmp_path, "return 1;")
    assert lox.main(["lox", script]) == 65
    assert "Can't return from top-level code." in capsys.readouterr().err


def test_runtime_error_exit_code(tmp_path, capsys):
    script = write_script(tmp_path, 'print "a";\nprint -"b";')
    assert lox.main(["lox", script]) == 70
    captured = capsys.readouterr()
    assert captured.out.splitlines() == ["a"]
    assert "[line 2] Runtime Error at '-': Operand must be a number." in captured.err


def test_missing_file(tmp_path, capsys):
    assert lox.main(["lox", str(tmp_path / "missing.lox")]) == 66
    assert "Could not read" in capsys.readouterr().err


def test_bad_usage(tmp_path, capsys):
    script = write_script(tmp_path, "print 1;")
    assert lox.main(["lox", "frobnicate", script]) == 64
    assert lox.main(["lox", "run", script, "extra"]) == 64
    assert "usage" in capsys.readouterr().err


def test_repl_keeps_state_and_joins_incomplete_lines(monkeypatch, capsys):
    """
    Test that an unfinished declaration waits for more lines before running.
    """
    lines = iter([
        "var a = 1;",
        "fun f() {",
        "  return a;",
        "}",
        "print f();",
        "print ;",
        "print a + 1;",
        "exit",
    ])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))
    assert lox.main(["lox"]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines()[2:] == ["1", "2"]
    assert "Expect expression." in captured.err


def test_repl_ends_on_eof(monkeypatch, capsys):
    def fake_input(prompt=""):
        raise EOFError

    monkeypatch.setattr("builtins.input", fake_input)
    assert lox.main(["lox"]) == 0


def test_deep_recursion_from_the_command_line(tmp_path, capsys):
    script = write_script(
        tmp_path,
        "fun count(n) { if (n > 0) return count(n - 1); return n; }\nprint count(1000);",
    )
    assert lox.main(["lox", script]) == 0
    assert capsys.readouterr().out.splitlines() == ["0"]


def test_stack_overflow_exit_code(tmp_path, capsys):
    script = write_script(tmp_path, "fun loop() { loop(); }\nloop();")
    assert lox.main(["lox", script]) == 70
    assert capsys.readouterr().err.splitlines() == ["Stack overflow."]


def test_diagnostics_are_plain_lines(tmp_path, capsys):
    script = write_script(tmp_path, "print 1;\nprint ;")
    assert lox.main(["lox", script]) == 65
    assert capsys.readouterr().err.splitlines() == ["[line 2] Error at ';': Expect expression."]
