"""Completeness analyzer: unfinished code, license, changelog, metadata, deployment."""

from __future__ import annotations

import json
import re

from ..models import AnalyzerResult, Category
from .base import AnalyzerContext, ScoreCard

PLACEHOLDER_PATTERN = re.compile(
    r"\b(TODO|FIXME|NotImplementedError|not implemented|placeholder|lorem ipsum)\b", re.IGNORECASE
)

LICENSE_NAMES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "COPYING")
CHANGELOG_NAMES = ("CHANGELOG.md", "CHANGELOG.rst", "CHANGELOG", "HISTORY.md", "CHANGES.md")
DEPLOY_CONFIGS = (
    "Dockerfile",
    "docker-compose.yml",
    "compose.yaml",
    "Procfile",
    "vercel.json",
    "netlify.toml",
    "fly.toml",
    "app.yaml",
    "k8s",
    "helm",
)


class CompletenessAnalyzer:
    """Checks (internal points out of 100):

        placeholder count     30
        license               20
        changelog             15
        metadata fields       15
        deployment config     20
    """

    category = Category.COMPLETENESS

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files

        placeholders = sum(
            len(PLACEHOLDER_PATTERN.findall(files.read_text(p))) for p in files.source_files()
        )
        card.metrics["placeholders"] = placeholders
        # Twenty placeholders cost every point.
        card.partial(30, 1 - placeholders / 20)
        if placeholders:
            card.issue(f"{placeholders} unfinished placeholder(s) in source code")
            card.recommend(
                "Finish or remove placeholder code",
                "TODO, FIXME and NotImplementedError mark unfinished features.",
                30 * min(1.0, placeholders / 20),
            )

        context.check_cancelled(self.category)

        if files.exists(*LICENSE_NAMES):
            card.award(20)
        else:
            card.miss(20, "No license file", "Add a LICENSE file")

        if files.exists(*CHANGELOG_NAMES):
            card.award(15)
        else:
            card.miss(15, "No changelog", "Keep a CHANGELOG")

        missing = self._missing_metadata(context)
        card.metrics["missing_metadata"] = missing
        card.partial(15, 1 - len(missing) / 3)
        if missing:
            card.issue(f"Project metadata missing: {', '.join(missing)}")
            card.recommend("Complete the project metadata", points=15 * len(missing) / 3)

        if files.exists(*DEPLOY_CONFIGS):
            card.award(20)
        else:
            card.miss(
                20,
                "No deployment configuration",
                "Add deployment configuration",
                "A Dockerfile or platform config makes the project shippable.",
            )

        return card.result()

    @staticmethod
    def _missing_metadata(context: AnalyzerContext) -> list[str]:
        files = context.files
        text = files.read_text("package.json")
        if text:
            try:
                data = json.loads(text)
            except ValueError:
                data = {}
            if not isinstance(data, dict):
                data = {}
            return [k for k in ("description", "license", "repository") if not data.get(k)]

        pyproject = files.read_text("pyproject.toml") + files.read_text("setup.cfg") + files.read_text(
            "setup.py"
        )
        if pyproject:
            return [k for k in ("description", "license", "url") if k not in pyproject]
        return ["description", "license", "repository"]
