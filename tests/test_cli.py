import json
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from clint import clint_cli

SRC_DIR = Path(__file__).resolve().parents[1] / "src"


def run_main(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    monkeypatch.setattr(sys, "argv", ["clint", *args])
    with pytest.raises(SystemExit) as exc:
        clint_cli.main()
    return int(exc.value.code or 0)


def test_run_clint_string_prints_rendering(capsys: pytest.CaptureFixture[str]) -> None:
    status = clint_cli.run_clint("var x = 1 + 2 * 3;", is_string=True)
    assert status == 0
    assert capsys.readouterr().out.strip() == "var x = (1 + (2 * 3));"


def test_run_clint_reports_diagnostics(capsys: pytest.CaptureFixture[str]) -> None:
    status = clint_cli.run_clint("if (x < y) { x", is_string=True)
    captured = capsys.readouterr()
    assert status == 1
    assert captured.out == ""
    assert "\texpected next token to be }, got EOF instead" in captured.err


def test_run_clint_file_input(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "prog.clint"
    path.write_text("var add = fun(a, b) { a + b };\nadd(1, 2);\n", encoding="utf-8")
    assert clint_cli.run_clint(str(path)) == 0
    assert capsys.readouterr().out.strip() == "var add = fun(a, b) (a + b);add(1, 2)"


def test_run_clint_rejects_other_extensions(tmp_path: Path) -> None:
    path = tmp_path / "prog.txt"
    path.write_text("1", encoding="utf-8")
    with pytest.raises(ValueError):
        clint_cli.run_clint(str(path))


def test_run_clint_tokens(capsys: pytest.CaptureFixture[str]) -> None:
    assert clint_cli.run_clint("var x", is_string=True, tokens_only=True) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        "Token(VAR, 'var', 1:1)",
        "Token(IDENT, 'x', 1:5)",
        "Token(EOF, '', 1:6)",
    ]


def test_run_clint_tokens_skip_parsing(capsys: pytest.CaptureFixture[str]) -> None:
    # Broken syntax is still a valid token stream.
    assert clint_cli.run_clint(")(", is_string=True, tokens_only=True) == 0
    assert capsys.readouterr().err == ""


def test_run_clint_json(capsys: pytest.CaptureFixture[str]) -> None:
    assert clint_cli.run_clint("-a", is_string=True, as_json=True) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["kind"] == "Program"
    stmt = data["statements"][0]
    assert stmt["kind"] == "ExpressionStatement"
    assert stmt["expression"]["kind"] == "PrefixExpression"
    assert stmt["expression"]["operand"]["name"] == "a"


def test_run_clint_output_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    out = tmp_path / "out.txt"
    assert clint_cli.run_clint("a * b", is_string=True, out=str(out)) == 0
    assert out.read_text(encoding="utf-8") == "(a * b)\n"
    assert capsys.readouterr().out == ""


def test_run_clint_max_depth(capsys: pytest.CaptureFixture[str]) -> None:
    assert clint_cli.run_clint("((1))", is_string=True, max_depth=2) == 1
    assert "maximum depth of 2" in capsys.readouterr().err


def test_run_clint_huge_max_depth_still_reports(
    capsys: pytest.CaptureFixture[str],
) -> None:
    source = "-" * 5000 + "1"
    assert clint_cli.run_clint(source, is_string=True, max_depth=100_000) == 1
    assert "expression nesting exceeds maximum depth" in capsys.readouterr().err


def test_run_clint_logs_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="clint")
    clint_cli.run_clint(")", is_string=True)
    assert "parsing program" in caplog.text
    assert "no prefix parse function for ) found" in caplog.text


def test_main_string_success(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_main(monkeypatch, "-s", "1 + 2") == 0
    assert capsys.readouterr().out.strip() == "(1 + 2)"


def test_main_string_with_errors(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_main(monkeypatch, "-s", "var = 1;") == 1
    assert "expected next token to be IDENT" in capsys.readouterr().err


def test_main_bad_extension(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_main(monkeypatch, "prog.py") == 2
    assert "[error] >>> Only .clint files are supported." in capsys.readouterr().err


def test_main_missing_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert run_main(monkeypatch, str(tmp_path / "missing.clint")) == 1
    assert "[error] >>>" in capsys.readouterr().err


def test_main_rejects_zero_depth(monkeypatch: pytest.MonkeyPatch) -> None:
    assert run_main(monkeypatch, "-s", "1", "--max-depth", "0") == 2


def test_main_without_arguments_starts_repl(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        "clint.clint_repl.start_repl", lambda **kwargs: calls.append(kwargs)
    )
    monkeypatch.setattr(sys, "argv", ["clint"])
    clint_cli.main()
    assert calls == [{}]


def test_main_repl_flag_passes_options(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict[str, Any]] = []
    monkeypatch.setattr(
        "clint.clint_repl.start_repl", lambda **kwargs: calls.append(kwargs)
    )
    monkeypatch.setattr(
        sys, "argv", ["clint", "--repl", "--verbose", "--max-depth", "7"]
    )
    clint_cli.main()
    assert calls == [{"verbose": True, "max_depth": 7}]


def test_cli_subprocess_runs() -> None:
    env = dict(os.environ, PYTHONPATH=str(SRC_DIR))
    result = subprocess.run(
        [sys.executable, "-m", "clint.clint_cli", "-s", "a - b - c"],
        capture_output=True,
        text=True,
        env=env,
    )
    assert result.returncode == 0
    assert result.stdout.strip() == "((a - b) - c)"


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])  # type: ignore[misc]
@given(
    a=st.integers(min_value=0, max_value=1000),
    b=st.integers(min_value=0, max_value=1000),
)  # type: ignore[misc]
def test_run_clint_infix_roundtrip(
    a: int, b: int, capsys: pytest.CaptureFixture[str]
) -> None:
    assert clint_cli.run_clint(f"{a} * {b}", is_string=True) == 0
    assert capsys.readouterr().out.strip() == f"({a} * {b})"
