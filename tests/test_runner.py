from __future__ import annotations

import io
import logging
import sys

import pytest

from sable import runner
from tests.support.harness import (
    SblNone,
    SblNumber,
    UnexpectedEndOfInput,
    UnexpectedTokenError,
    ast,
    new_environment,
    run_program,
)


def _run_main(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["sable", *argv])
    runner.main()


def test_wrap_program() -> None:
    assert runner.wrap_program("1 2") == "{1 2}"


def test_parse_program_is_implicit_block() -> None:
    assert runner.parse_program("1 2") == ast.block([ast.number(1), ast.number(2)])
    assert runner.parse_program("") == ast.block([])


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("1 } 2", id="close-then-expr"),
        pytest.param("}", id="lone-close"),
        pytest.param("} {", id="close-open"),
    ],
)
def test_parse_program_rejects_trailing_tokens(source: str) -> None:
    with pytest.raises(UnexpectedTokenError) as exc_info:
        runner.parse_program(source)

    assert "end of input" in str(exc_info.value)


def test_parse_program_unbalanced_open() -> None:
    with pytest.raises(UnexpectedEndOfInput):
        runner.parse_program("{ 1")


def test_run_uses_given_environment() -> None:
    env = new_environment()
    assert run_program("x = 2", env) == SblNumber(2)
    assert run_program("x * 21", env) == SblNumber(42)


def test_run_empty_program_is_none() -> None:
    assert run_program("") == SblNone()
    assert run_program("  \n ") == SblNone()


def test_main_literal_source(monkeypatch, capsys) -> None:
    _run_main(monkeypatch, "fn sq(n) n * n\nsq(7)")
    assert capsys.readouterr().out == "49\n"


def test_main_reads_file(monkeypatch, capsys, tmp_path) -> None:
    script = tmp_path / "prog.sbl"
    script.write_text("fn zero() 0\nzero()\n", encoding="utf-8")

    _run_main(monkeypatch, str(script))
    assert capsys.readouterr().out == "0\n"


@pytest.mark.parametrize("argv", [(), ("-",)], ids=["no-arg", "dash"])
def test_main_reads_stdin(monkeypatch, capsys, argv) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO("1 < 2"))
    _run_main(monkeypatch, *argv)
    assert capsys.readouterr().out == "true\n"


def test_main_empty_stdin_exits(monkeypatch) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))
    with pytest.raises(SystemExit) as exc_info:
        _run_main(monkeypatch)

    assert "No input" in str(exc_info.value.code)


def test_main_prints_none(monkeypatch, capsys) -> None:
    _run_main(monkeypatch, "{}")
    assert capsys.readouterr().out == "none\n"


@pytest.mark.parametrize(
    "source, fragment",
    [
        pytest.param("1 + $", "Unexpected character '$'", id="lex"),
        pytest.param("fn main(x y) 0", "Missing ','", id="parse"),
        pytest.param("nope()", "Name 'nope' not found", id="runtime"),
    ],
)
def test_main_reports_errors_on_stdout(monkeypatch, capsys, source, fragment) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _run_main(monkeypatch, source)

    assert exc_info.value.code == 1
    out = capsys.readouterr().out
    assert out.startswith("Error: ")
    assert fragment in out


def test_main_traceback_when_debugging(monkeypatch, capsys) -> None:
    monkeypatch.setenv("SABLE_DEBUG_PY_TRACE", "1")
    with pytest.raises(SystemExit):
        _run_main(monkeypatch, "1 / 0")

    out = capsys.readouterr().out
    assert "Division by zero" in out
    assert "Python traceback:" in out


def test_main_rejects_second_positional(monkeypatch) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _run_main(monkeypatch, "1", "2")

    assert "Unexpected argument: 2" in str(exc_info.value.code)


def test_main_verbose_logs_calls(monkeypatch, capsys, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="sable")
    _run_main(monkeypatch, "-v", "fn id(x) x\nid(3)")

    assert capsys.readouterr().out == "3\n"
    messages = [record.getMessage() for record in caplog.records]
    assert "call id(3)" in messages
