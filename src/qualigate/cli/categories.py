"""Categories command: list categories, weights and default gate thresholds."""

import json

import typer
from rich.table import Table

from ..categories import DEFAULT_CATEGORIES
from ..config import DEFAULT_CATEGORY_THRESHOLDS, DEFAULT_OVERALL_THRESHOLD
from . import app
from ._common import console


@app.command()
def categories(
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List the scoring categories with their weights and default thresholds.
    """
    if json_output:
        data = {
            "overall": DEFAULT_OVERALL_THRESHOLD.to_dict(),
            "categories": [
                {
                    "key": d.category.value,
                    "name": d.name,
                    "weight": d.max_score,
                    "description": d.description,
                    "threshold": DEFAULT_CATEGORY_THRESHOLDS[d.category].to_dict(),
                }
                for d in DEFAULT_CATEGORIES
            ],
        }
        print(json.dumps(data, indent=2))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Category", min_width=28)
    table.add_column("Weight", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Warn", justify="right")

    for d in DEFAULT_CATEGORIES:
        threshold = DEFAULT_CATEGORY_THRESHOLDS[d.category]
        table.add_row(
            d.category.value,
            d.name,
            f"{d.max_score:g}",
            f"{threshold.minimum:g}",
            f"{threshold.warning:g}",
        )
    table.add_section()
    table.add_row(
        "overall",
        "Overall",
        f"{sum(d.max_score for d in DEFAULT_CATEGORIES):g}",
        f"{DEFAULT_OVERALL_THRESHOLD.minimum:g}",
        f"{DEFAULT_OVERALL_THRESHOLD.warning:g}",
    )
    console.print(table)
