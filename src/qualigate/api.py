"""Public API for Qualigate.

Example:
    >>> from qualigate import evaluate_gates, score_project
    >>>
    >>> result = score_project("/path/to/app")
    >>> result.overall.grade
    'B-'
    >>>
    >>> report = evaluate_gates(result)
    >>> report.passed
    True
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .analyzers import AnalyzerRegistry
from .config import GatesConfig, ScoringConfig, load_config
from .gates import GatesReport, QualityGates
from .logging_config import get_logger, setup_logging
from .models import ScoringResult
from .scoring import ProjectScorer

logger = get_logger(__name__)


def score_project(
    path: Union[str, Path] = ".",
    config_file: Optional[Path] = None,
    registry: Optional[AnalyzerRegistry] = None,
    **overrides,
) -> ScoringResult:
    """Score a project and return the complete result.

    Pipeline:
    1. Load configuration (auto-discover TOML + apply overrides)
    2. Discover project metadata
    3. Run analyzers concurrently
    4. Calculate category and overall scores
    5. Rank recommendations

    Args:
        path: Project root (default: current directory)
        config_file: Optional explicit config file path
        registry: Custom analyzers (default: the seven built-ins)
        **overrides: Configuration overrides (e.g. categories="quality,testing")

    Raises:
        ConfigurationError: If configuration, path or categories are invalid
    """
    config = load_config(config_file=config_file, project_root=Path(path), **overrides)
    setup_logging(config.verbosity)
    logger.info(f"Scoring {path}")
    logger.debug(
        f"Configuration loaded: {len(config.categories)} categories, {config.verbosity} mode"
    )

    return ProjectScorer(config, registry).score(path)


def evaluate_gates(
    result: ScoringResult,
    config: Union[None, ScoringConfig, GatesConfig] = None,
) -> GatesReport:
    """Evaluate quality gates against a scoring result.

    With a ScoringConfig, gates are built for its configured categories, so
    a configured category missing from ``result`` fails its gate. Otherwise
    gates cover the categories present in ``result``.

    Raises:
        ConfigurationError: If the gate thresholds are invalid
    """
    if isinstance(config, ScoringConfig):
        gates_config = config.gates
        categories = config.categories
    else:
        gates_config = config or GatesConfig()
        categories = tuple(result.categories)

    if not gates_config.enabled:
        logger.info("Quality gates disabled")
        timestamp = result.overall.timestamp if result.overall else ""
        return GatesReport.disabled(timestamp)

    return QualityGates.from_config(gates_config, categories).evaluate(result)
