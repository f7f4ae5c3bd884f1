"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import ScoringConfig
from ..models import ScoringResult
from ..scoring import ProjectScorer

console = Console()
err_console = Console(stderr=True)

EXIT_GATES_FAILED = 1
EXIT_VALIDATION_FAILED = 3


def run_scoring(path: Path, config: ScoringConfig, show_progress: bool = True) -> ScoringResult:
    """Score ``path`` with a spinner on stderr."""
    if not show_progress:
        return ProjectScorer(config).score(path)

    with err_console.status("[cyan]Scoring project...[/cyan]") as status:
        scorer = ProjectScorer(
            config, on_progress=lambda message: status.update(f"[cyan]{message}[/cyan]")
        )
        return scorer.score(path)


def write_report(content: str, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content if content.endswith("\n") else content + "\n", encoding="utf-8")


def report_validation_errors(errors: tuple[str, ...], title: Optional[str] = None) -> None:
    err_console.print(f"[red]{title or 'Result validation failed'}:[/red]")
    for error in errors:
        err_console.print(f"  - {error}", markup=False)
