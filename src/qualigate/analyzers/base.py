"""Analyzer contract, run context, scoring helper and registry."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Protocol

from ..exceptions import AnalysisCancelledError, UnknownCategoryError
from ..models import AnalyzerResult, Category, ProjectType, Recommendation
from ..scanning import ProjectFiles


@dataclass(frozen=True)
class AnalyzerContext:
    """Everything an analyzer may read during one run.

    The cancel flag is shared with the orchestrator; long-running analyzers
    call ``check_cancelled()`` between checks.
    """

    project_root: Path
    max_score: float
    project_type: ProjectType = ProjectType.UNKNOWN
    verbose: bool = False
    max_file_size: int = 2 * 1024 * 1024
    extra_skip_dirs: tuple[str, ...] = ()
    cancel_event: threading.Event = field(default_factory=threading.Event, compare=False)

    @cached_property
    def files(self) -> ProjectFiles:
        return ProjectFiles(
            self.project_root,
            max_file_size=self.max_file_size,
            extra_skip_dirs=self.extra_skip_dirs,
        )

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def check_cancelled(self, category: Optional[Category] = None) -> None:
        if self.cancel_event.is_set():
            raise AnalysisCancelledError(category.value if category else None)


class Analyzer(Protocol):
    """Produces the raw result for one category."""

    category: Category

    def run(self, context: AnalyzerContext) -> AnalyzerResult: ...


AnalyzerFactory = Callable[[], Analyzer]


class ScoreCard:
    """Accumulates check points on a 0-100 scale for one analyzer.

    ``result()`` scales the total to the category's ``max_score`` and clamps
    it into ``[0, max_score]``. Recommendation impact is expressed in
    category points, not internal points.
    """

    def __init__(self, category: Category, max_score: float):
        self.category = category
        self.max_score = max_score
        self.points = 0.0
        self.issues: list[str] = []
        self.recommendations: list[Recommendation] = []
        self.metrics: dict[str, Any] = {}

    def award(self, points: float) -> None:
        self.points += points

    def partial(self, points: float, ratio: float) -> None:
        """Award ``points`` scaled by ``ratio`` in [0, 1]."""
        self.points += points * min(1.0, max(0.0, ratio))

    def issue(self, message: str) -> None:
        self.issues.append(message)

    def recommend(self, suggestion: str, description: str = "", points: float = 0.0) -> None:
        self.recommendations.append(
            Recommendation(
                suggestion=suggestion,
                description=description,
                impact=round(points * self.max_score / 100, 2),
                category=self.category,
            )
        )

    def miss(self, points: float, issue: str, suggestion: str, description: str = "") -> None:
        """Record a failed check: no points, one issue, one recommendation."""
        self.issue(issue)
        self.recommend(suggestion, description, points)

    def result(self) -> AnalyzerResult:
        scaled = self.points * self.max_score / 100
        score = round(min(self.max_score, max(0.0, scaled)), 2)
        return AnalyzerResult(
            category=self.category,
            score=score,
            max_score=self.max_score,
            issues=tuple(self.issues),
            recommendations=tuple(self.recommendations),
            metrics=dict(self.metrics),
        )


class AnalyzerRegistry:
    """Ordered lookup table of category -> analyzer factory.

    Registration order is the output order of every scoring run.
    """

    def __init__(self) -> None:
        self._factories: dict[Category, AnalyzerFactory] = {}

    def register(self, category: Category | str, factory: AnalyzerFactory) -> None:
        """Register ``factory`` for ``category``, replacing any previous one."""
        self._factories[Category.parse(category)] = factory

    def unregister(self, category: Category | str) -> None:
        self._factories.pop(Category.parse(category), None)

    def create(self, category: Category) -> Analyzer:
        factory = self._factories.get(category)
        if factory is None:
            raise UnknownCategoryError(str(category), [c.value for c in self._factories])
        return factory()

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._factories)

    def __contains__(self, category: object) -> bool:
        return category in self._factories

    def __iter__(self) -> Iterator[Category]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)
