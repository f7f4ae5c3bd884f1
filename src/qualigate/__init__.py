"""
Qualigate - Project quality scoring and CI quality gates

Scores a project across seven weighted categories, grades the result, ranks
improvement recommendations, and evaluates pass/warn/fail gates that can
block a CI pipeline.
"""

__version__ = "0.3.0"

from .api import evaluate_gates, score_project
from .config import GatesConfig, GateThreshold, ScoringConfig, load_config
from .gates import GatesReport, QualityGates
from .models import Category, ScoringResult

__all__ = [
    "score_project",  # Main entry point
    "evaluate_gates",
    "load_config",
    "ScoringConfig",
    "GatesConfig",
    "GateThreshold",
    "QualityGates",
    "GatesReport",
    "ScoringResult",
    "Category",
]
