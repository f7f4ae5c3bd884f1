"""HTML formatter: the rich report exported as a standalone page."""

from ..models import ScoringResult
from .rich_formatter import RichFormatter


class HtmlFormatter(RichFormatter):
    def render(self, result: ScoringResult) -> None:
        print(self.format(result))

    def format(self, result: ScoringResult) -> str:
        recorder = self._recording_console()
        self._print(recorder, result)
        return recorder.export_html(inline_styles=True)
