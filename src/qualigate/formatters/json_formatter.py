"""JSON formatter for Qualigate."""

import json

from ..models import ScoringResult
from ..scoring import ResultsProcessor
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render the full result as JSON."""

    def render(self, result: ScoringResult) -> None:
        print(self.format(result))

    def format(self, result: ScoringResult) -> str:
        data = ResultsProcessor.format_full(result)
        if not self.show_recommendations:
            data.pop("recommendations", None)
            for category in data["categories"].values():
                category.pop("recommendations", None)
        return json.dumps(data, indent=2)
