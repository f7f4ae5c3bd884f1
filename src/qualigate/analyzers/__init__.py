"""Analyzer contract and the built-in heuristic analyzers."""

from .base import Analyzer, AnalyzerContext, AnalyzerFactory, AnalyzerRegistry, ScoreCard
from .completeness import CompletenessAnalyzer
from .devexp import DevExpAnalyzer
from .performance import PerformanceAnalyzer
from .quality import QualityAnalyzer
from .security import SecurityAnalyzer
from .structure import StructureAnalyzer
from .testing import TestingAnalyzer

BUILTIN_ANALYZERS = (
    StructureAnalyzer,
    QualityAnalyzer,
    PerformanceAnalyzer,
    TestingAnalyzer,
    SecurityAnalyzer,
    DevExpAnalyzer,
    CompletenessAnalyzer,
)


def default_registry() -> AnalyzerRegistry:
    """Registry holding the seven built-in analyzers in weight order."""
    registry = AnalyzerRegistry()
    for cls in BUILTIN_ANALYZERS:
        registry.register(cls.category, cls)
    return registry


__all__ = [
    "Analyzer",
    "AnalyzerContext",
    "AnalyzerFactory",
    "AnalyzerRegistry",
    "ScoreCard",
    "BUILTIN_ANALYZERS",
    "StructureAnalyzer",
    "QualityAnalyzer",
    "PerformanceAnalyzer",
    "TestingAnalyzer",
    "SecurityAnalyzer",
    "DevExpAnalyzer",
    "CompletenessAnalyzer",
    "default_registry",
]
