"""Scoring pipeline: orchestration, calculation, result processing."""

from .calculator import ScoreCalculator
from .grades import GRADE_THRESHOLDS, grade_for, percentage, round_half_up
from .orchestrator import AnalyzerOrchestrator
from .results import OUTPUT_SHAPES, ResultsProcessor
from .scorer import ProjectScorer

__all__ = [
    "AnalyzerOrchestrator",
    "ScoreCalculator",
    "ResultsProcessor",
    "ProjectScorer",
    "GRADE_THRESHOLDS",
    "OUTPUT_SHAPES",
    "grade_for",
    "percentage",
    "round_half_up",
]
