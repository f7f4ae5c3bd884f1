"""Threshold engine: builds gate definitions and evaluates them."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..categories import display_name, total_weight
from ..config import GatesConfig
from ..exceptions import ConfigurationError
from ..logging_config import get_logger
from ..models import Category, CategoryScore, ScoringResult
from .models import OVERALL, GateDefinition, GateResult, GatesReport, GateSummary, scope_key

logger = get_logger(__name__)

OVERALL_GATE_NAME = "Overall Quality Score"

FULL_WEIGHT = 100.0


def build_gate_definitions(
    gates: GatesConfig, categories: Iterable[Category]
) -> list[GateDefinition]:
    """One overall gate plus one gate per active category with a threshold.

    When only a subset of categories is active the overall thresholds are
    scaled by ``active_weight / 100`` so they stay comparable with the
    reduced maximum.
    """
    active = list(dict.fromkeys(categories))
    overall = gates.overall
    weight = total_weight(active)
    if active and weight != FULL_WEIGHT:
        overall = overall.scaled(weight / FULL_WEIGHT)
        logger.debug(
            f"Overall gate scaled to {overall.minimum:g}/{overall.warning:g} for weight {weight:g}"
        )

    definitions = [GateDefinition.from_threshold(OVERALL_GATE_NAME, OVERALL, overall)]
    for category in active:
        threshold = gates.categories.get(category)
        if threshold is None:
            continue
        definitions.append(GateDefinition.from_threshold(display_name(category), category, threshold))
    return definitions


class QualityGates:
    """Evaluates gate definitions against a scoring result.

    Raises:
        ConfigurationError: If no gates are defined
    """

    def __init__(self, definitions: Sequence[GateDefinition]):
        if not definitions:
            raise ConfigurationError("No quality gates configured")
        self.definitions = tuple(definitions)

    @classmethod
    def from_config(cls, gates: GatesConfig, categories: Iterable[Category]) -> "QualityGates":
        return cls(build_gate_definitions(gates, categories))

    def evaluate(self, result: ScoringResult) -> GatesReport:
        gate_results = tuple(self._evaluate_gate(d, result) for d in self.definitions)
        summary = _summarize(gate_results)
        passed = all(g.passed for g in gate_results if g.block_on_failure)

        if passed:
            message = f"Quality gates PASSED ({summary.passed}/{summary.total} gates passed)"
        else:
            message = f"Quality gates FAILED ({summary.failed}/{summary.total} gates failed)"
        logger.info(message)

        overall = result.overall
        timestamp = overall.timestamp if overall else ""
        if not timestamp and result.metadata is not None:
            timestamp = result.metadata.analyzed_at

        return GatesReport(
            gates=gate_results,
            summary=summary,
            passed=passed,
            message=message,
            timestamp=timestamp,
            overall_score=overall.score if overall else None,
            scores={c.value: s.score for c, s in result.categories.items()},
        )

    def _evaluate_gate(self, definition: GateDefinition, result: ScoringResult) -> GateResult:
        if definition.is_overall:
            overall = result.overall
            if overall is None:
                return _unscored(definition, "overall score missing")
            return _judge(definition, overall.score, max_score=overall.max_score, grade=overall.grade)

        category_score: Optional[CategoryScore] = result.categories.get(definition.scope)
        if category_score is None:
            return _unscored(definition, "category was not scored")
        return _judge(
            definition,
            category_score.score,
            max_score=category_score.max_score,
            grade=category_score.grade,
            issues=category_score.issues,
            suggestions=tuple(r.suggestion for r in category_score.recommendations),
        )


def _judge(
    definition: GateDefinition,
    score: float,
    max_score: Optional[float] = None,
    grade: Optional[str] = None,
    issues: tuple[str, ...] = (),
    suggestions: tuple[str, ...] = (),
) -> GateResult:
    passed = score >= definition.minimum
    warning = passed and score < definition.warning
    return GateResult(
        name=definition.name,
        scope=definition.scope,
        score=score,
        threshold=definition.minimum,
        warning_threshold=definition.warning,
        passed=passed,
        warning=warning,
        message=gate_message(scope_key(definition.scope), score, definition, passed, warning),
        block_on_failure=definition.block_on_failure,
        max_score=max_score,
        grade=grade,
        issues=tuple(issues),
        suggestions=suggestions,
    )


def _unscored(definition: GateDefinition, reason: str) -> GateResult:
    logger.warning(f"Gate '{definition.name}' failed: {reason}")
    return GateResult(
        name=definition.name,
        scope=definition.scope,
        score=None,
        threshold=definition.minimum,
        warning_threshold=definition.warning,
        passed=False,
        warning=False,
        message=f"{scope_key(definition.scope)}: {reason} - FAILED",
        block_on_failure=definition.block_on_failure,
    )


def gate_message(
    key: str, score: float, definition: GateDefinition, passed: bool, warning: bool
) -> str:
    base = f"{key}: {score:g} (threshold: {definition.minimum:g})"
    if passed and not warning:
        return f"{base} - PASSED"
    if passed:
        return f"{base} - PASSED (warning: below {definition.warning:g})"
    return f"{base} - FAILED"


def _summarize(gates: Sequence[GateResult]) -> GateSummary:
    passed = sum(1 for g in gates if g.passed)
    total = len(gates)
    return GateSummary(
        passed=passed,
        failed=total - passed,
        warnings=sum(1 for g in gates if g.warning),
        total=total,
        pass_rate=round(passed * 100 / total, 2) if total else 0.0,
    )
