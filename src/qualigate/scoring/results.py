"""Result assembly, validation, recommendation ranking and output shapes."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from ..config import ScoringConfig
from ..logging_config import get_logger
from ..models import (
    Category,
    CategoryScore,
    ProjectMetadata,
    Recommendation,
    ScoreSheet,
    ScoringResult,
    ValidationResult,
)

logger = get_logger(__name__)

SCORE_TOLERANCE = 0.1

OUTPUT_SHAPES = ("full", "summary", "console")


class ResultsProcessor:
    """Validates, aggregates and formats scoring results.

    Every ``format_*`` method reads the already-computed scores; none of
    them re-derives a score or grade.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def build(self, metadata: Optional[ProjectMetadata], sheet: ScoreSheet) -> ScoringResult:
        recommendations: tuple[Recommendation, ...] = ()
        if self.config.include_recommendations:
            recommendations = self.aggregate_recommendations(
                sheet.categories, limit=self.config.max_recommendations
            )
        return ScoringResult(
            metadata=metadata,
            categories=dict(sheet.categories),
            overall=sheet.overall,
            recommendations=recommendations,
            summary=sheet.summary,
        )

    @staticmethod
    def aggregate_recommendations(
        categories: Mapping[Category, CategoryScore] | Iterable[CategoryScore],
        limit: Optional[int] = None,
    ) -> tuple[Recommendation, ...]:
        """Merge recommendations from all categories into one ranked list.

        Sorted by impact descending (stable, so ties keep category order),
        then deduplicated by suggestion text with the first occurrence kept.
        """
        scores = categories.values() if isinstance(categories, Mapping) else categories
        collected = [r for score in scores for r in score.recommendations]
        ranked = sorted(collected, key=lambda r: r.impact, reverse=True)

        seen: set[str] = set()
        unique: list[Recommendation] = []
        for rec in ranked:
            if rec.suggestion in seen:
                continue
            seen.add(rec.suggestion)
            unique.append(rec)

        if limit is not None:
            unique = unique[:limit]
        return tuple(unique)

    @staticmethod
    def validate(result: ScoringResult) -> ValidationResult:
        """Check internal consistency. Never corrects anything."""
        errors: list[str] = []

        if result.overall is None:
            errors.append("Missing overall score")
        if not result.categories:
            errors.append("No category scores")
        if result.metadata is None:
            errors.append("Missing project metadata")

        for category, score in result.categories.items():
            if not 0 <= score.score <= score.max_score:
                errors.append(
                    f"Category {category} score {score.score} outside [0, {score.max_score}]"
                )

        if result.overall is not None and result.categories:
            total = sum(c.score for c in result.categories.values())
            if abs(total - result.overall.score) > SCORE_TOLERANCE:
                errors.append(
                    f"Score mismatch: categories sum to {total:.2f}, overall is {result.overall.score:.2f}"
                )
            total_max = sum(c.max_score for c in result.categories.values())
            if abs(total_max - result.overall.max_score) > 1e-9:
                errors.append(
                    f"Max score mismatch: categories sum to {total_max:g}, "
                    f"overall is {result.overall.max_score:g}"
                )
            if not 0 <= result.overall.percentage <= 100:
                errors.append(f"Overall percentage {result.overall.percentage} outside [0, 100]")

        for error in errors:
            logger.warning(f"Validation: {error}")
        return ValidationResult(is_valid=not errors, errors=tuple(errors))

    def format(self, result: ScoringResult, shape: str = "full") -> Any:
        """Dispatch to ``format_<shape>``.

        Raises:
            ValueError: If shape is not recognized
        """
        formatters = {
            "full": self.format_full,
            "summary": self.format_summary,
            "console": self.format_console,
        }
        formatter = formatters.get(shape)
        if formatter is None:
            raise ValueError(f"Unknown output shape: {shape!r}. Choose from: {', '.join(OUTPUT_SHAPES)}")
        return formatter(result)

    @staticmethod
    def format_full(result: ScoringResult) -> dict[str, Any]:
        """JSON-ready dict for programmatic consumers."""
        return {
            "metadata": result.metadata.to_dict() if result.metadata else None,
            "overall": result.overall.to_dict() if result.overall else None,
            "categories": {c.value: score.to_dict() for c, score in result.categories.items()},
            "recommendations": [r.to_dict() for r in result.recommendations],
            "summary": result.summary.to_dict(),
        }

    @staticmethod
    def format_summary(result: ScoringResult) -> dict[str, Any]:
        overall = result.overall
        return {
            "score": overall.score if overall else 0,
            "max_score": overall.max_score if overall else 0,
            "percentage": overall.percentage if overall else 0,
            "grade": overall.grade if overall else "F",
            "categories": len(result.categories),
            "has_errors": overall.has_errors if overall else True,
            "timestamp": overall.timestamp if overall else "",
        }

    @staticmethod
    def format_console(result: ScoringResult) -> str:
        """Plain-text rendering for terminals without rich output."""
        lines: list[str] = []
        if result.metadata is not None:
            meta = result.metadata
            lines.append(f"Project: {meta.project_name} {meta.version} ({meta.project_type.value})")
        overall = result.overall
        if overall is not None:
            lines.append(
                f"Overall: {overall.score:g}/{overall.max_score:g} "
                f"({overall.percentage}%) grade {overall.grade}"
            )
        lines.append("")

        width = max((len(s.name) for s in result.categories.values()), default=0)
        for score in result.categories.values():
            line = (
                f"  {score.name:<{width}}  {score.score:>6g}/{score.max_score:<4g}"
                f" {score.percentage:>3}%  {score.grade}"
            )
            if score.error is not None:
                line += f"  [error: {score.error}]"
            lines.append(line)
            for issue in score.issues:
                lines.append(f"      ! {issue}")

        if result.recommendations:
            lines.append("")
            lines.append("Top recommendations:")
            for rec in result.recommendations[:10]:
                lines.append(f"  - [{rec.priority}] {rec.suggestion} (+{rec.impact:g})")

        return "\n".join(lines)
