"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="qualigate",
    help="Qualigate - project quality scoring and CI quality gates",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Score a project across seven weighted categories and enforce quality gates.
    """
    if version:
        console.print(f"[bold cyan]Qualigate[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .score import score as _score  # noqa: F401, E402
from .gates import gates as _gates  # noqa: F401, E402
from .categories import categories as _categories  # noqa: F401, E402
