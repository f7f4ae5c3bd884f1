"""Base interface for CI output formats."""

from abc import ABC, abstractmethod
from typing import Optional

from ...config import GatesConfig
from ..models import GatesReport


class CIFormat(ABC):
    """Maps a GatesReport to one CI platform's report syntax.

    Formatting is presentation only: it never changes pass/fail.
    """

    name: str = ""

    @abstractmethod
    def format(self, report: GatesReport, config: Optional[GatesConfig] = None) -> str:
        """Return the platform-specific report text."""


def status_label(passed: bool, warning: bool = False) -> str:
    if not passed:
        return "FAILED"
    if warning:
        return "WARNING"
    return "PASSED"


def score_text(score: Optional[float], threshold: Optional[float] = None) -> str:
    if score is None:
        return "n/a"
    if threshold is None:
        return f"{score:g}"
    return f"{score:g}/{threshold:g}"
