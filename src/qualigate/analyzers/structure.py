"""Structure analyzer: source layout, file sizes, directory depth."""

from __future__ import annotations

from ..logging_config import get_logger
from ..models import AnalyzerResult, Category
from .base import AnalyzerContext, ScoreCard

logger = get_logger(__name__)

LARGE_FILE_LINES = 500
MAX_COMFORTABLE_DEPTH = 6

_SOURCE_DIRS = ("src", "lib", "app", "pkg", "packages", "server", "client")


class StructureAnalyzer:
    """Scores how navigable the source tree is.

    Checks (internal points out of 100):
        source directory present          25
        share of files under 500 lines    35
        nesting depth                     20
        module count in a sane range      20
    """

    category = Category.STRUCTURE

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files
        sources = files.source_files()
        card.metrics["source_files"] = len(sources)

        source_dir = files.first_existing(*_SOURCE_DIRS)
        top_level_modules = [p for p in sources if len(p.parts) == 1]
        if source_dir or (sources and len(top_level_modules) <= 3):
            card.award(25)
        else:
            card.miss(
                25,
                "No dedicated source directory",
                "Move source files into a src/ or lib/ directory",
                "A top-level source directory separates code from configuration and tooling.",
            )
        card.metrics["source_dir"] = source_dir

        context.check_cancelled(self.category)

        large = [p for p in sources if files.line_count(p) > LARGE_FILE_LINES]
        card.metrics["large_files"] = len(large)
        if sources:
            ratio = 1 - len(large) / len(sources)
            card.partial(35, ratio)
            if large:
                card.issue(f"{len(large)} file(s) exceed {LARGE_FILE_LINES} lines")
                for path in large[:5]:
                    logger.debug(f"Large file: {path}")
                card.recommend(
                    "Split large files into smaller modules",
                    f"Largest offenders: {', '.join(str(p) for p in large[:3])}",
                    35 * (1 - ratio),
                )
        else:
            card.issue("No source files found")

        depth = max((len(p.parts) - 1 for p in sources), default=0)
        card.metrics["max_depth"] = depth
        if depth <= MAX_COMFORTABLE_DEPTH:
            card.award(20)
        else:
            card.partial(20, 1 - (depth - MAX_COMFORTABLE_DEPTH) / MAX_COMFORTABLE_DEPTH)
            card.miss(
                10,
                f"Directory nesting reaches depth {depth}",
                "Flatten deeply nested directories",
            )

        if 1 <= len(sources) <= 2000:
            card.award(20)
        elif sources:
            card.award(10)
            card.issue(f"{len(sources)} source files in one project")

        return card.result()
