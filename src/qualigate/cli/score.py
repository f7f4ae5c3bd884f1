"""Score command: grade a project across the weighted categories."""

from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..config import load_config
from ..exceptions import ConfigurationError, QualigateError
from ..formatters import get_formatter
from ..logging_config import setup_logging, verbosity_from_flags
from ..scoring import ResultsProcessor
from . import app
from ._common import (
    EXIT_VALIDATION_FAILED,
    console,
    err_console,
    report_validation_errors,
    run_scoring,
    write_report,
)


@app.command()
def score(
    path: Path = typer.Argument(
        Path("."),
        help="Project root to score",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    categories: Optional[str] = typer.Option(
        None,
        "--categories",
        help="Comma-separated categories to score, or 'all'",
    ),
    fmt: str = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format",
        click_type=click.Choice(["console", "json", "html"], case_sensitive=False),
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the report to a file instead of stdout",
        dir_okay=False,
    ),
    detailed: bool = typer.Option(
        False,
        "--detailed",
        "-d",
        help="Show issues per category and recommendation details",
    ),
    recommendations: Optional[bool] = typer.Option(
        None,
        "--recommendations/--no-recommendations",
        help="Include ranked recommendations (default: on)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append debug logs to this file",
        dir_okay=False,
    ),
):
    """
    Score a project and print its grade, category breakdown and recommendations.

    [bold cyan]Examples:[/bold cyan]

      qualigate score

      qualigate score ./my-app --categories quality,testing

      qualigate score --format json --output quality-report.json

      qualigate score --detailed --no-recommendations
    """
    logger = setup_logging(
        verbosity_from_flags(verbose, quiet), log_file=str(log_file) if log_file else None
    )
    fmt = fmt.lower()

    try:
        settings = load_config(
            config_file=config,
            project_root=path,
            categories=categories,
            include_recommendations=recommendations,
            verbose=verbose,
            quiet=quiet,
        )
        formatter = get_formatter(
            fmt, detailed=detailed, show_recommendations=settings.include_recommendations
        )

        result = run_scoring(path, settings, show_progress=fmt == "console" and not quiet)
        validation = ResultsProcessor.validate(result)

        if output is not None:
            write_report(formatter.format(result), output)
            if not quiet:
                overall = result.overall
                console.print(
                    f"[green]Report written to {output}[/green] "
                    f"({overall.score:g}/{overall.max_score:g}, grade {overall.grade})"
                )
        else:
            formatter.render(result)

        if not validation.is_valid:
            report_validation_errors(validation.errors)
            raise typer.Exit(EXIT_VALIDATION_FAILED)

    except typer.Exit:
        raise

    except ConfigurationError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

    except QualigateError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

    except KeyboardInterrupt:
        logger.info("Scoring interrupted by user")
        err_console.print("\n[yellow]Scoring interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during scoring")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)
