from __future__ import annotations

import sys

import typer
from loguru import logger

from errtrail.config import get_settings
from errtrail.errors import Error, equal, parse

app = typer.Typer(
    name="errtrail",
    help="Inspect serialized errtrail errors copied from logs",
)


def read_text(value: str) -> str:
    """Return *value*, or stdin when it is ``-``."""
    if value == "-":
        return sys.stdin.read().strip()
    return value


def load(value: str) -> Error:
    err = parse(read_text(value))
    if err is None:
        typer.echo("Empty error text", err=True)
        raise typer.Exit(2)
    return err


def render(err: Error) -> list[str]:
    lines = [f"code: {err.code}"]
    for index, (site, *context) in enumerate(err.trail):
        suffix = " " + ", ".join(repr(value) for value in context) if context else ""
        lines.append(f"{index:>3} {site}{suffix}")
    return lines


@app.command("show", help="Print the code and trail of TEXT ('-' reads stdin)")
def show(text: str = typer.Argument(...)) -> None:
    for line in render(load(text)):
        typer.echo(line)


@app.command("code", help="Print only the code of TEXT ('-' reads stdin)")
def code(text: str = typer.Argument(...)) -> None:
    typer.echo(load(text).code)


@app.command("equal", help="Compare two errors by code; exit 1 when they differ")
def equal_cmd(first: str, second: str) -> None:
    same = equal(load(first), load(second))
    typer.echo("true" if same else "false")
    raise typer.Exit(0 if same else 1)


@app.callback()
def root(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log errtrail internals to stderr"
    ),
) -> None:
    """Root command for errtrail."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG")
        logger.enable("errtrail")
    else:
        logger.add(sys.stderr, level=get_settings().log_level)


def main() -> None:  # pragma: no cover - CLI entry point
    """Entrypoint for the CLI."""
    app()


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
