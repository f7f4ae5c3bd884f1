"""Gates command: evaluate quality gates and emit CI output."""

from dataclasses import replace
from pathlib import Path
from typing import Optional

import click
import typer
from rich.markup import escape

from ..api import evaluate_gates
from ..config import CI_FORMATS, load_config, parse_thresholds
from ..exceptions import ConfigurationError, QualigateError
from ..gates import generate_ci_output
from ..gates.formats import ConsoleFormat
from ..logging_config import setup_logging, verbosity_from_flags
from ..scoring import ResultsProcessor
from . import app
from ._common import (
    EXIT_GATES_FAILED,
    EXIT_VALIDATION_FAILED,
    err_console,
    report_validation_errors,
    run_scoring,
)


@app.command()
def gates(
    path: Path = typer.Argument(
        Path("."),
        help="Project root to evaluate",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="CI output format (default: from config, 'auto' detects the CI system)",
        click_type=click.Choice(list(CI_FORMATS), case_sensitive=False),
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the CI report to a file; a plain summary goes to stdout",
        dir_okay=False,
    ),
    blocking: Optional[str] = typer.Option(
        None,
        "--blocking",
        help="Exit 1 when a blocking gate fails: true | false (default: true)",
        click_type=click.Choice(["true", "false"], case_sensitive=False),
    ),
    thresholds: Optional[str] = typer.Option(
        None,
        "--thresholds",
        help='Threshold overrides as JSON, e.g. \'{"overall": {"min": 75, "warning": 85}}\'',
    ),
    categories: Optional[str] = typer.Option(
        None,
        "--categories",
        help="Comma-separated categories to score, or 'all'",
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
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append debug logs to this file",
        dir_okay=False,
    ),
):
    """
    Score a project, evaluate quality gates and emit CI-specific output.

    All output is written before the exit status is decided. With blocking
    on (the default) a failed blocking gate exits with status 1.

    [bold cyan]Examples:[/bold cyan]

      qualigate gates

      qualigate gates --format github-actions

      qualigate gates --format jenkins --output reports/quality-gates.xml

      qualigate gates --blocking false --thresholds '{"overall": {"min": 60}}'
    """
    logger = setup_logging(
        verbosity_from_flags(verbose), log_file=str(log_file) if log_file else None
    )

    try:
        settings = load_config(
            config_file=config,
            project_root=path,
            categories=categories,
            verbose=verbose,
        )
        gates_config = settings.gates
        if thresholds:
            gates_config = parse_thresholds(thresholds, gates_config)
        if blocking is not None:
            gates_config = replace(gates_config, blocking=blocking.lower() == "true")
        if fmt is not None:
            gates_config = replace(gates_config, ci_format=fmt.lower())
        settings = replace(settings, gates=gates_config)

        result = run_scoring(path, settings, show_progress=False)
        validation = ResultsProcessor.validate(result)
        report = evaluate_gates(result, settings)

        ci_output = generate_ci_output(
            report, gates_config.ci_format, config=gates_config, output_path=output
        )
        if output is not None:
            print(ConsoleFormat().format(report, gates_config))
        else:
            print(ci_output.content)

        if not validation.is_valid:
            report_validation_errors(validation.errors)
            raise typer.Exit(EXIT_VALIDATION_FAILED)

        if gates_config.blocking and not report.passed:
            err_console.print("[red]Quality gates failed - blocking deployment[/red]")
            raise typer.Exit(EXIT_GATES_FAILED)

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
        logger.info("Gate evaluation interrupted by user")
        err_console.print("\n[yellow]Gate evaluation interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during gate evaluation")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        if verbose:
            err_console.print_exception()
        raise typer.Exit(1)
