"""
kumi CLI - Entry point.

Commands:

- repl: interactive read-eval-print loop (the default with no command)
- run: evaluate a file line by line in one program context
- eval: evaluate a single expression
- tokens: print the token stream of an expression
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console

from kumi._version import get_version
from kumi.core.config import ShellConfig, load_config
from kumi.core.errors import ConfigError, KumiError
from kumi.core.expression_lang.tokenizer import tokenize
from kumi.core.interpreter import Interpreter

logger = logging.getLogger(__name__)

console = Console(highlight=False, emoji=False)
err_console = Console(stderr=True, highlight=False, emoji=False)

EXIT_COMMANDS = frozenset({"exit", "quit"})


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"kumi {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


app = typer.Typer(
    help="""kumi – a small typed expression language

Evaluates numeric and boolean expressions with `let` declarations:

  kumi eval "let x = 2 ^ 10"
  kumi run program.kumi
  kumi            (starts the interactive shell)
""",
    invoke_without_command=True,
)


def _configure_logging(config: ShellConfig) -> None:
    logging.basicConfig(
        level=config.log_level_value,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_error(error: Exception, config: ShellConfig) -> None:
    err_console.print(
        str(error),
        style="red" if config.color else None,
        markup=False,
        soft_wrap=True,
    )


def _print_result(text: str) -> None:
    console.print(text, markup=False, soft_wrap=True)


def _get_config(ctx: typer.Context) -> ShellConfig:
    config = ctx.obj if isinstance(ctx.obj, ShellConfig) else None
    return config or load_config()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a kumi.toml file (default: ./kumi.toml if present)",
    ),
) -> None:
    """kumi CLI main callback for global options."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)
    _configure_logging(config)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        repl_loop(config)


def repl_loop(config: ShellConfig) -> None:
    """Read lines until EOF or ``exit``, echoing each result or error."""
    interpreter = Interpreter(config=config)
    logger.info("Starting REPL")

    while True:
        try:
            line = console.input(config.prompt, markup=False)
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        line = line.strip()
        if not line:
            continue
        if line in EXIT_COMMANDS:
            break

        try:
            result = interpreter.execute(line)
        except KumiError as e:
            _print_error(e, config)
            continue

        _print_result(str(result))


@app.command()
def repl(ctx: typer.Context) -> None:
    """Start the interactive shell."""
    repl_loop(_get_config(ctx))


@app.command()
def run(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Source file; each non-blank line is one input"),
) -> None:
    """Evaluate a file line by line in a single program context."""
    config = _get_config(ctx)
    try:
        source = file.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"Cannot read {file}: {e}", err=True)
        raise typer.Exit(code=1)

    interpreter = Interpreter(config=config)
    for line_number, raw in enumerate(source.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            result = interpreter.execute(line)
        except KumiError as e:
            typer.echo(f"{file}:{line_number}", err=True)
            _print_error(e, config)
            raise typer.Exit(code=1)
        _print_result(str(result))


@app.command(name="eval")
def eval_command(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to evaluate"),
) -> None:
    """Evaluate one expression and print its value."""
    config = _get_config(ctx)
    try:
        result = Interpreter(config=config).execute(expression)
    except KumiError as e:
        _print_error(e, config)
        raise typer.Exit(code=1)
    _print_result(str(result))


@app.command()
def tokens(
    ctx: typer.Context,
    expression: str = typer.Argument(..., help="Expression to tokenize"),
) -> None:
    """Print the token stream of an expression, one token per line."""
    config = _get_config(ctx)
    try:
        token_list = tokenize(expression)
    except KumiError as e:
        _print_error(e, config)
        raise typer.Exit(code=1)
    for token in token_list:
        _print_result(f"{token.start:>4}-{token.end:<4} {token.kind.name:<8} {token}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
