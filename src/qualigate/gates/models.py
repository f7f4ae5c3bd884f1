"""Gate definitions, per-gate results and the aggregate report."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from ..config import GateThreshold
from ..exceptions import InvalidThresholdError
from ..models import Category

OVERALL = "overall"

GateScope = Union[str, Category]


def scope_key(scope: GateScope) -> str:
    return scope.value if isinstance(scope, Category) else scope


@dataclass(frozen=True)
class GateDefinition:
    """A threshold applied to the overall score or one category's score.

    Raises:
        InvalidThresholdError: If a threshold is negative or warning < minimum
    """

    name: str
    scope: GateScope
    minimum: float
    warning: float
    block_on_failure: bool = True

    def __post_init__(self) -> None:
        if self.scope != OVERALL and not isinstance(self.scope, Category):
            object.__setattr__(self, "scope", Category.parse(self.scope))
        key = scope_key(self.scope)
        if self.minimum < 0 or self.warning < 0:
            raise InvalidThresholdError(key, "thresholds must be >= 0")
        if self.warning < self.minimum:
            raise InvalidThresholdError(
                key, f"warning ({self.warning:g}) must be >= minimum ({self.minimum:g})"
            )

    @classmethod
    def from_threshold(cls, name: str, scope: GateScope, threshold: GateThreshold) -> "GateDefinition":
        return cls(
            name=name,
            scope=scope,
            minimum=threshold.minimum,
            warning=threshold.warning,
            block_on_failure=threshold.block_on_failure,
        )

    @property
    def is_overall(self) -> bool:
        return self.scope == OVERALL


@dataclass(frozen=True)
class GateResult:
    """Outcome of one gate.

    ``issues`` and ``suggestions`` are copied from the category for category
    gates and are empty for the overall gate.
    """

    name: str
    scope: GateScope
    score: Optional[float]
    threshold: float
    warning_threshold: float
    passed: bool
    warning: bool
    message: str
    block_on_failure: bool = True
    max_score: Optional[float] = None
    grade: Optional[str] = None
    issues: tuple[str, ...] = ()
    suggestions: tuple[str, ...] = ()

    @property
    def blocking_failure(self) -> bool:
        return self.block_on_failure and not self.passed

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "scope": scope_key(self.scope),
            "score": self.score,
            "threshold": self.threshold,
            "warning_threshold": self.warning_threshold,
            "passed": self.passed,
            "warning": self.warning,
            "message": self.message,
            "block_on_failure": self.block_on_failure,
            "max_score": self.max_score,
            "grade": self.grade,
            "issues": list(self.issues),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class GateSummary:
    passed: int = 0
    failed: int = 0
    warnings: int = 0
    total: int = 0
    pass_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "failed": self.failed,
            "warnings": self.warnings,
            "total": self.total,
            "pass_rate": self.pass_rate,
        }


@dataclass(frozen=True)
class GatesReport:
    """All gate results plus the blocking decision.

    ``passed`` is the logical AND over gates with ``block_on_failure``;
    non-blocking gates can fail or warn without flipping it.
    """

    gates: tuple[GateResult, ...]
    summary: GateSummary
    passed: bool
    message: str
    timestamp: str = ""
    overall_score: Optional[float] = None
    scores: Mapping[str, float] = field(default_factory=dict)
    enabled: bool = True

    @property
    def failed_gates(self) -> tuple[GateResult, ...]:
        return tuple(g for g in self.gates if not g.passed)

    @property
    def warning_gates(self) -> tuple[GateResult, ...]:
        return tuple(g for g in self.gates if g.warning)

    @classmethod
    def disabled(cls, timestamp: str = "") -> "GatesReport":
        return cls(
            gates=(),
            summary=GateSummary(),
            passed=True,
            message="Quality gates disabled",
            timestamp=timestamp,
            enabled=False,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "message": self.message,
            "timestamp": self.timestamp,
            "summary": self.summary.to_dict(),
            "gates": [g.to_dict() for g in self.gates],
            "results": {"overall": self.overall_score, "categories": dict(self.scores)},
        }
