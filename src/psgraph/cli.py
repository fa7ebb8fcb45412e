"""
psgraph CLI - Entry point.

Commands:
- plot: parse an expression and write its graph as PostScript
- eval: print f(x) at one or more points
- tokens: show the token stream of an expression

Arguments that start with '-', such as a window "-5:5:-5:5", are taken as
positional values. An expression whose letters collide with a short option
('-a', '-c', '-v') must follow a '--' separator, e.g. ``psgraph plot -- "-cos(x)" out.ps``.
"""

from __future__ import annotations

import logging
import math
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from psgraph._version import get_version
from psgraph.core.config import RenderConfig, find_config, load_config
from psgraph.core.errors import OutputError, PsGraphError
from psgraph.core.expression_lang import evaluate, parse_expr, sample, tokenize
from psgraph.core.ir import uses_variable
from psgraph.core.limits import LIMITS_FORMAT, default_limits, parse_limits
from psgraph.render import render, to_postscript

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="""psgraph – plot single-variable functions as PostScript

Expressions use the variable x, the operators + - * / ^, parentheses and
the functions sin cos tan abs ln log asin acos atan sinh cosh tanh exp.
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"psgraph version {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """psgraph CLI main callback for global options."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _fail(error: PsGraphError) -> typer.Exit:
    """Print a single diagnostic for ``error`` and build the matching exit."""
    err_console.print(f"[red]Error ({error.stage}):[/red] {escape(str(error))}")
    return typer.Exit(code=error.exit_code)


def _resolve_config(config_path: Path | None) -> RenderConfig:
    path = config_path or find_config(Path.cwd())
    if path is None:
        return RenderConfig()
    return load_config(path)


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return f"{value:.10g}"


@app.command(context_settings={"ignore_unknown_options": True})
def plot(
    expression: str = typer.Argument(..., help="Expression in x, e.g. 'sin(x) + x^2'"),
    output: str = typer.Argument(..., help="Output PostScript file ('-' for stdout)"),
    limits: str | None = typer.Argument(None, help=f"Window as {LIMITS_FORMAT}"),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to psgraph.toml (default: ./psgraph.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Draw the graph of EXPRESSION inside the window and write it to OUTPUT.

    Nothing is written unless the expression, limits and configuration are
    all valid.
    """
    _configure_logging(verbose)

    try:
        render_config = _resolve_config(config)
        window = parse_limits(limits) if limits else default_limits(render_config.default_limit)
        expr = parse_expr(expression)
        ops = render(window, expr, render_config)
        document = to_postscript(ops)

        if not uses_variable(expr):
            err_console.print(
                f"[yellow]Warning:[/yellow] {escape(str(expr))} does not use x; "
                "the curve is a horizontal line"
            )

        if output == "-":
            typer.echo(document, nl=False)
            return

        try:
            payload = document.encode("ascii")
        except UnicodeEncodeError as e:
            bad = e.object[e.start : e.end]
            raise OutputError(f"Graph contains non-ASCII text: {bad!r}") from e

        try:
            with open(output, "wb") as stream:
                stream.write(payload)
        except OSError as e:
            raise OutputError(f"Cannot write output file {output}: {e.strerror or e}") from e

    except PsGraphError as e:
        raise _fail(e) from e

    logger.info("Wrote graph of %s to %s", expr, output)
    err_console.print(f"Plotted [bold]{escape(str(expr))}[/bold] on {window} → {escape(output)}")


@app.command("eval", context_settings={"ignore_unknown_options": True})
def eval_command(
    expression: str = typer.Argument(..., help="Expression in x"),
    at: list[float] = typer.Option(
        [0.0], "--at", "-a", help="Value of x (repeat for several points)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Evaluate EXPRESSION at the given x values.

    Undefined points are reported as nan, poles as inf.
    """
    _configure_logging(verbose)

    try:
        expr = parse_expr(expression)
    except PsGraphError as e:
        raise _fail(e) from e

    if len(at) == 1:
        typer.echo(_format_value(evaluate(expr, at[0])))
        return

    table = Table(title=f"f(x) = {escape(str(expr))}")
    table.add_column("x", justify="right")
    table.add_column("f(x)", justify="right")
    for x, y in sample(expr, at):
        table.add_row(_format_value(x), _format_value(y))
    console.print(table)


@app.command()
def tokens(
    expression: str = typer.Argument(..., help="Expression in x"),
) -> None:
    """Show the tokens the lexer produces for EXPRESSION."""
    try:
        token_list = tokenize(expression)
    except PsGraphError as e:
        raise _fail(e) from e

    table = Table()
    table.add_column("pos", justify="right")
    table.add_column("kind")
    table.add_column("value")
    for tok in token_list:
        table.add_row(str(tok.pos), tok.kind.value, escape(str(tok.value)))
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    app(args=argv if argv is not None else sys.argv[1:])


if __name__ == "__main__":
    main()
