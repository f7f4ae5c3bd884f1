"""Analysis-related exceptions: analyzer failures and cancellation."""

from typing import Optional

from .base import QualigateError


class AnalysisError(QualigateError):
    """Base class for analysis-related errors."""
    pass


class AnalyzerFailedError(AnalysisError):
    """Raised when an analyzer cannot produce a result."""

    def __init__(self, category: str, reason: str):
        super().__init__(
            f"Analyzer for {category} failed: {reason}",
            details={"category": category, "reason": reason},
        )
        self.category = category
        self.reason = reason


class AnalysisCancelledError(AnalysisError):
    """Raised inside an analyzer that notices the run was cancelled."""

    def __init__(self, category: Optional[str] = None):
        details = {"category": category} if category else None
        super().__init__("cancelled", details=details)
        self.category = category
