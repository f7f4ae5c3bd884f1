"""End-to-end scoring run: discovery, analyzers, calculation, assembly."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..analyzers import AnalyzerRegistry
from ..config import ScoringConfig
from ..environment import discover_project
from ..logging_config import get_logger
from ..models import ScoringResult
from .calculator import ScoreCalculator
from .orchestrator import AnalyzerOrchestrator, ProgressCallback
from .results import ResultsProcessor

logger = get_logger(__name__)


class ProjectScorer:
    """Wires the pipeline together for one project.

    Example:
        >>> scorer = ProjectScorer(ScoringConfig(categories="quality,testing"))
        >>> result = scorer.score(Path("."))
        >>> result.overall.max_score
        35
    """

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        registry: Optional[AnalyzerRegistry] = None,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.config = config or ScoringConfig()
        self.orchestrator = AnalyzerOrchestrator(self.config, registry, on_progress)
        self.calculator = ScoreCalculator()
        self.processor = ResultsProcessor(self.config)

    def score(self, project_root: Path | str) -> ScoringResult:
        """Score the project at ``project_root``.

        Raises:
            ConfigurationError: If the path or category selection is invalid
        """
        categories = self.orchestrator.resolve_categories(self.config.categories)
        metadata = discover_project(project_root, project_type=self.config.project_type)

        raw = self.orchestrator.run(metadata, categories)
        sheet = self.calculator.calculate(raw, metadata)
        result = self.processor.build(metadata, sheet)

        overall = result.overall
        logger.info(
            f"Scored {metadata.project_name}: {overall.score:g}/{overall.max_score:g} "
            f"({overall.percentage}%, {overall.grade})"
        )
        return result

    def cancel(self) -> None:
        self.orchestrator.cancel()
