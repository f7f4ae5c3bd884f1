"""Code quality analyzer: lint/format/type-check setup and leftover markers."""

from __future__ import annotations

import re

from ..models import AnalyzerResult, Category
from .base import AnalyzerContext, ScoreCard

MARKER_PATTERN = re.compile(r"\b(TODO|FIXME|XXX|HACK)\b")

LINT_CONFIGS = (
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yml",
    "eslint.config.js",
    "eslint.config.mjs",
    ".flake8",
    ".pylintrc",
    "ruff.toml",
    ".ruff.toml",
    ".golangci.yml",
    ".rubocop.yml",
)
FORMAT_CONFIGS = (
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.js",
    "prettier.config.js",
    ".editorconfig",
    "rustfmt.toml",
    ".clang-format",
)
TYPE_CONFIGS = ("tsconfig.json", "mypy.ini", ".mypy.ini", "pyrightconfig.json")


def _pyproject_tools(context: AnalyzerContext) -> str:
    return context.files.read_text("pyproject.toml") + context.files.read_text("setup.cfg")


class QualityAnalyzer:
    """Scores maintainability tooling and hygiene.

    Checks (internal points out of 100):
        linter configured           30
        formatter configured        20
        type checking configured    25
        marker density              25
    """

    category = Category.QUALITY

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files
        tools = _pyproject_tools(context)

        has_linter = files.exists(*LINT_CONFIGS) or any(
            t in tools for t in ("[tool.ruff", "[tool.pylint", "[flake8]")
        )
        card.metrics["linter"] = has_linter
        if has_linter:
            card.award(30)
        else:
            card.miss(
                30,
                "No linter configuration found",
                "Add a linter configuration",
                "ESLint, Ruff or an equivalent catches bugs before review.",
            )

        has_formatter = files.exists(*FORMAT_CONFIGS) or any(
            t in tools for t in ("[tool.black", "[tool.ruff.format", "[tool.isort")
        )
        card.metrics["formatter"] = has_formatter
        if has_formatter:
            card.award(20)
        else:
            card.miss(
                20,
                "No formatter configuration found",
                "Adopt an automatic code formatter",
                "Prettier, Black or Ruff format remove style debates from review.",
            )

        has_types = files.exists(*TYPE_CONFIGS) or "[tool.mypy" in tools or "[mypy]" in tools
        card.metrics["type_checking"] = has_types
        if has_types:
            card.award(25)
        else:
            card.miss(
                25,
                "No type checking configured",
                "Enable static type checking",
                "Configure TypeScript strict mode or mypy.",
            )

        context.check_cancelled(self.category)

        sources = files.source_files()
        markers = sum(len(MARKER_PATTERN.findall(files.read_text(p))) for p in sources)
        lines = sum(files.line_count(p) for p in sources) or 1
        per_kloc = markers * 1000 / lines
        card.metrics["markers"] = markers
        card.metrics["markers_per_kloc"] = round(per_kloc, 2)
        # Five markers per thousand lines costs all of the hygiene points.
        card.partial(25, 1 - per_kloc / 5)
        if per_kloc >= 1:
            card.issue(f"{markers} TODO/FIXME markers ({per_kloc:.1f} per 1000 lines)")
            card.recommend(
                "Resolve or ticket outstanding TODO/FIXME markers",
                "Leftover markers hide unfinished work.",
                25 * min(1.0, per_kloc / 5),
            )

        return card.result()
