"""Tests for CLI commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from reckon.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


class TestEvalCommand:
    def test_eval(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "2", "*", "(3+4)"])
        assert result.exit_code == 0
        assert result.output.strip() == "14"

    def test_eval_single_argument(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1/2"])
        assert result.exit_code == 0
        assert result.output.strip() == "0.5"

    def test_eval_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "1", "+"])
        assert result.exit_code == 1
        assert "^" in result.output
        assert "error: unfinished expression" in result.output

    def test_eval_unknown_name(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["eval", "2 * foo"])
        assert result.exit_code == 1
        assert "2 * foo" in result.output
        assert "error: name not found" in result.output

    def test_eval_precision_from_config(self, cli_runner: CliRunner, config_file: Path) -> None:
        config_file.write_text("[output]\nprecision = 4\n")
        result = cli_runner.invoke(app, ["--config", str(config_file), "eval", "pi"])
        assert result.exit_code == 0
        assert result.output.strip() == "3.142"


class TestReplCommand:
    def test_threads_ans(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["repl"], input="1 + 2\nans * 2\n\n2ans\n")
        assert result.exit_code == 0
        assert result.output.split() == ["3", "6", "12"]

    def test_errors_do_not_stop_the_loop(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["repl"], input="5\n(1\nans + 1\n")
        assert result.exit_code == 0
        assert "error: unbalanced parens" in result.output
        assert result.output.strip().endswith("6")

    def test_failed_line_keeps_previous_ans(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["repl"], input="4\nsqrt(1, 2)\nans\n")
        assert "error: bad argument" in result.output
        assert result.output.strip().endswith("4")

    def test_compact_style(self, cli_runner: CliRunner, config_file: Path) -> None:
        config_file.write_text('[diagnostics]\nstyle = "compact"\n')
        result = cli_runner.invoke(app, ["--config", str(config_file), "repl"], input="12 5\n")
        assert "   ^" in result.output
        assert "12 5" not in result.output


class TestOtherCommands:
    def test_functions(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["functions"])
        assert result.exit_code == 0
        assert "sqrt" in result.output
        assert "3.141592653589793" in result.output
        lines = {line.split()[1]: line for line in result.output.splitlines() if len(line.split()) > 2}
        assert "function" in lines["all"]
        assert "constant" in lines["pi"]

    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "reckon version" in result.output

    def test_bad_config(self, cli_runner: CliRunner, config_file: Path) -> None:
        config_file.write_text('[diagnostics]\nstyle = "loud"\n')
        result = cli_runner.invoke(app, ["--config", str(config_file), "eval", "1"])
        assert result.exit_code == 2
        assert "diagnostics.style" in result.output
