"""
reckon CLI.

Commands:

- eval: evaluate the expression given on the command line
- repl: evaluate stdin line by line, threading each result into ``ans``
- functions: list the builtin functions and constants
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from reckon._version import get_version
from reckon.core.environment import ANS, BasicEnvironment
from reckon.core.errors import BadArgumentError, ErrorKind, EvaluationError, ReckonError
from reckon.core.expression_lang.engine import ExpressionEngine, evaluate
from reckon.core.manifest import ConfigError, ReckonConfig, format_value, load_config

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="reckon - arithmetic expression evaluator.",
    no_args_is_help=True,
    add_completion=False,
)

BANNER = """\
Welcome to reckon, the arithmetic expression evaluator.

Enter an expression, eg. 2 + 3, and press enter.
Press ctrl-D to exit.

  +-*/%^  : Operators with correct precedence.
  (expr)  : Group expression with parentheses.
  ans     : Use answer from previous expression.
  f(a, b) : Call a builtin; `reckon functions` lists them.
"""


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"reckon version {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to reckon.toml (default: ./reckon.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Load configuration and set up logging for every command."""
    try:
        cfg = load_config(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    level = logging.DEBUG if verbose else getattr(logging, cfg.logging.level, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    if cfg.path is not None:
        logger.debug("Loaded configuration from %s", cfg.path)
    ctx.obj = cfg


def _report(error: EvaluationError, source: str, style: str, indent: str = "") -> None:
    """Print a caret diagnostic for ``error`` on stderr."""
    if error.kind == ErrorKind.INTERNAL_ERROR:
        logger.error("Internal evaluation error on %r, please report this", source)
    if style == "compact":
        text = error.compact_diagnostic(source)
    else:
        text = error.diagnostic(source)
    text = "".join(indent + line for line in text.splitlines(keepends=True))
    err_console.print(text, style="red", markup=False, highlight=False, soft_wrap=True, end="")


@app.command("eval", context_settings={"ignore_unknown_options": True})
def eval_command(
    ctx: typer.Context,
    expression: list[str] = typer.Argument(..., help="Expression, possibly split over several arguments"),
) -> None:
    """Evaluate an expression and print the result."""
    cfg: ReckonConfig = ctx.obj
    engine = ExpressionEngine(BasicEnvironment())
    # Arguments are fed as separate chunks; each must hold whole tokens.
    try:
        for i, chunk in enumerate(expression):
            if i:
                engine.feed(" ")
            engine.feed(chunk)
        value = engine.result()
    except EvaluationError as e:
        _report(e, " ".join(expression), cfg.diagnostics.style)
        raise typer.Exit(code=1)

    typer.echo(format_value(value, cfg.output.precision))


@app.command("repl")
def repl_command(ctx: typer.Context) -> None:
    """Read expressions from stdin, one per line."""
    cfg: ReckonConfig = ctx.obj
    env = BasicEnvironment()
    stdin = typer.get_text_stream("stdin")
    interactive = stdin.isatty()
    prompt = cfg.repl.prompt

    if interactive:
        typer.echo(BANNER)

    while True:
        if interactive:
            typer.echo(prompt, nl=False)
        line = stdin.readline()
        if not line:
            break
        line = line.strip()
        if not line:
            continue

        try:
            value = evaluate(env, line)
        except EvaluationError as e:
            if interactive:
                # The prompt line already shows the input; line up the caret under it.
                _report(e, line, "compact", indent=" " * len(prompt))
            else:
                _report(e, line, cfg.diagnostics.style)
            continue

        typer.echo(format_value(value, cfg.output.precision))
        env.set_value(ANS, value)

    if interactive:
        typer.echo("")


def _constant_value(env: BasicEnvironment, name: str) -> float | None:
    """Return the value of a constant, or None for a function.

    Constants accept no arguments at all; variadic functions such as ``all``
    also accept an empty list, so a single argument must be rejected too.
    """
    function = env.resolve_function(name)
    try:
        value = function(env, [])
    except (ReckonError, ArithmeticError, ValueError):
        return None
    try:
        function(env, [0.0])
    except BadArgumentError:
        return value
    except (ArithmeticError, ValueError):
        pass
    return None


@app.command("functions")
def functions_command() -> None:
    """List builtin functions and constants."""
    env = BasicEnvironment()
    table = Table(title="Builtins")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Value", justify="right")

    for name in sorted([*env.functions, ANS]):
        if not name:
            continue
        value = _constant_value(env, name)
        if value is None:
            table.add_row(name, "function", "")
        else:
            table.add_row(name, "constant", format_value(value))

    console.print(table)


def main(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    app(args=argv if argv is not None else sys.argv[1:], prog_name="reckon")


if __name__ == "__main__":
    main()
