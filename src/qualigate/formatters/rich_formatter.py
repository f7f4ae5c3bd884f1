"""Rich terminal formatter for Qualigate."""

from io import StringIO
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import ScoringResult
from .base import BaseFormatter

MAX_RECOMMENDATIONS_SHOWN = 10
MAX_ISSUES_SHOWN = 5


def grade_style(grade: str) -> str:
    if grade.startswith("A"):
        return "green bold"
    if grade.startswith("B"):
        return "green"
    if grade.startswith("C"):
        return "yellow"
    if grade.startswith("D"):
        return "red"
    return "red bold"


def _priority_label(priority: str) -> str:
    if priority == "high":
        return "[red]high[/red]"
    elif priority == "medium":
        return "[yellow]medium[/yellow]"
    else:
        return "[dim]low[/dim]"


class RichFormatter(BaseFormatter):
    """Summary panel, category table and recommendation list."""

    def __init__(
        self,
        detailed: bool = False,
        show_recommendations: bool = True,
        console: Optional[Console] = None,
    ):
        super().__init__(detailed, show_recommendations)
        self.console = console or Console()

    def render(self, result: ScoringResult) -> None:
        self._print(self.console, result)

    def format(self, result: ScoringResult) -> str:
        recorder = self._recording_console()
        self._print(recorder, result)
        return recorder.export_text()

    @staticmethod
    def _recording_console() -> Console:
        return Console(record=True, file=StringIO(), width=100)

    def _print(self, console: Console, result: ScoringResult) -> None:
        self._print_summary(console, result)
        self._print_categories(console, result)
        if self.detailed:
            self._print_details(console, result)
        if self.show_recommendations and result.recommendations:
            self._print_recommendations(console, result)

    def _print_summary(self, console: Console, result: ScoringResult) -> None:
        overall = result.overall
        meta = result.metadata
        lines = []
        if meta is not None:
            lines.append(
                f"[bold]{escape(meta.project_name)}[/bold] {meta.version}  "
                f"[dim]({meta.project_type.value})[/dim]"
            )
        if overall is not None:
            style = grade_style(overall.grade)
            lines.append(
                f"Score: [bold]{overall.score:g}[/bold]/{overall.max_score:g}  "
                f"({overall.percentage}%)  Grade: [{style}]{overall.grade}[/{style}]"
            )
            if overall.has_errors:
                lines.append("[red]Some analyzers failed; their categories scored 0.[/red]")
        console.print(
            Panel("\n".join(lines), title="[bold cyan]Quality Score[/bold cyan]", expand=False)
        )

    def _print_categories(self, console: Console, result: ScoringResult) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Category", min_width=28)
        table.add_column("Score", justify="right")
        table.add_column("%", justify="right")
        table.add_column("Grade", justify="center")
        table.add_column("Issues", justify="right")

        for score in result.categories.values():
            style = grade_style(score.grade)
            name = score.name if score.error is None else f"{score.name} [red](failed)[/red]"
            table.add_row(
                name,
                f"{score.score:g}/{score.max_score:g}",
                str(score.percentage),
                f"[{style}]{score.grade}[/{style}]",
                str(len(score.issues)),
            )
        console.print(table)

    def _print_details(self, console: Console, result: ScoringResult) -> None:
        for score in result.categories.values():
            if not score.issues:
                continue
            console.print()
            console.print(f"[bold]{score.name}[/bold]")
            for issue in score.issues[:MAX_ISSUES_SHOWN]:
                console.print(f"  [yellow]-[/yellow] {escape(issue)}")
            if len(score.issues) > MAX_ISSUES_SHOWN:
                console.print(f"  [dim]... and {len(score.issues) - MAX_ISSUES_SHOWN} more[/dim]")

    def _print_recommendations(self, console: Console, result: ScoringResult) -> None:
        console.print()
        console.print("[bold cyan]Recommendations[/bold cyan]")
        for rec in result.recommendations[:MAX_RECOMMENDATIONS_SHOWN]:
            console.print(
                f"  {_priority_label(rec.priority)}  {escape(rec.suggestion)} "
                f"[dim](+{rec.impact:g} pts)[/dim]"
            )
            if self.detailed and rec.description:
                console.print(f"      [dim]{escape(rec.description)}[/dim]")
