"""Exception hierarchy for Qualigate."""

from .analysis import (
    AnalysisCancelledError,
    AnalysisError,
    AnalyzerFailedError,
)
from .base import QualigateError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    InvalidThresholdError,
    UnknownCategoryError,
    UnsupportedFormatError,
)

__all__ = [
    "QualigateError",
    "AnalysisError",
    "AnalyzerFailedError",
    "AnalysisCancelledError",
    "ConfigurationError",
    "UnknownCategoryError",
    "InvalidThresholdError",
    "InvalidConfigError",
    "InvalidPathError",
    "UnsupportedFormatError",
]
