"""Weighted score aggregation and grading."""

from __future__ import annotations

from typing import Mapping, Optional

from ..categories import CATEGORY_DEFINITIONS
from ..models import (
    AnalyzerResult,
    Category,
    CategoryDefinition,
    CategoryScore,
    OverallScore,
    ProjectMetadata,
    ScoreSheet,
    ScoreSummary,
)
from .grades import FAILING_GRADE, grade_for, percentage, ratio_percentage

ATTENTION_PERCENTAGE = 70


class ScoreCalculator:
    """Turns raw analyzer results into graded category and overall scores.

    ``calculate`` is a pure function of its inputs: the timestamp is taken
    from the metadata, never from the clock.
    """

    def __init__(self, definitions: Optional[Mapping[Category, CategoryDefinition]] = None):
        self.definitions = definitions or CATEGORY_DEFINITIONS

    def calculate(
        self,
        results: Mapping[Category, AnalyzerResult],
        metadata: Optional[ProjectMetadata] = None,
    ) -> ScoreSheet:
        categories = {
            category: self.category_score(category, result) for category, result in results.items()
        }
        overall = self.overall_score(categories, metadata.analyzed_at if metadata else "")
        return ScoreSheet(
            categories=categories,
            overall=overall,
            summary=self.summarize(categories),
        )

    def category_score(self, category: Category, result: AnalyzerResult) -> CategoryScore:
        definition = self.definitions[category]
        if result.failed:
            pct, grade = 0, FAILING_GRADE
        else:
            pct = percentage(result.score, result.max_score)
            grade = grade_for(pct)
        return CategoryScore(
            category=category,
            name=definition.name,
            score=result.score,
            max_score=result.max_score,
            percentage=pct,
            grade=grade,
            issues=result.issues,
            recommendations=result.recommendations,
            metrics=dict(result.metrics),
            error=result.error,
        )

    @staticmethod
    def overall_score(categories: Mapping[Category, CategoryScore], timestamp: str = "") -> OverallScore:
        """Sum of category scores graded on the unrounded percentage."""
        total = round(sum(c.score for c in categories.values()), 2)
        total_max = sum(c.max_score for c in categories.values())
        if total_max <= 0:
            pct, grade = 0, FAILING_GRADE
        else:
            pct = percentage(total, total_max)
            grade = grade_for(ratio_percentage(total, total_max))
        return OverallScore(
            score=total,
            max_score=total_max,
            percentage=pct,
            grade=grade,
            has_errors=any(c.error is not None for c in categories.values()),
            timestamp=timestamp,
        )

    @staticmethod
    def summarize(categories: Mapping[Category, CategoryScore]) -> ScoreSummary:
        scores = list(categories.values())
        if not scores:
            return ScoreSummary()
        best = max(scores, key=lambda c: c.percentage)
        worst = min(scores, key=lambda c: c.percentage)
        return ScoreSummary(
            total_issues=sum(len(c.issues) for c in scores),
            total_recommendations=sum(len(c.recommendations) for c in scores),
            best_category=best.category,
            worst_category=worst.category,
            needs_attention=tuple(c.category for c in scores if c.percentage < ATTENTION_PERCENTAGE),
        )
