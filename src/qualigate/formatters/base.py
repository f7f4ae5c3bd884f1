"""Base formatter interface for Qualigate score output."""

from abc import ABC, abstractmethod

from ..models import ScoringResult


class BaseFormatter(ABC):
    """Abstract base class for score report formatters.

    Args:
        detailed: Include per-category issues and metrics
        show_recommendations: Include the ranked recommendation list
    """

    def __init__(self, detailed: bool = False, show_recommendations: bool = True):
        self.detailed = detailed
        self.show_recommendations = show_recommendations

    @abstractmethod
    def render(self, result: ScoringResult) -> None:
        """Write the report to stdout."""

    @abstractmethod
    def format(self, result: ScoringResult) -> str:
        """Return the report as a string."""
