"""Data models for Qualigate.

Every entity here is produced once per scoring run and never mutated
afterwards, so all dataclasses are frozen and sequences are stored as tuples.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from .exceptions import UnknownCategoryError


class Category(str, Enum):
    """The closed set of scoring categories."""

    STRUCTURE = "structure"
    QUALITY = "quality"
    PERFORMANCE = "performance"
    TESTING = "testing"
    SECURITY = "security"
    DEVEXP = "devexp"
    COMPLETENESS = "completeness"

    @classmethod
    def parse(cls, text: "str | Category") -> "Category":
        """Parse a category key, enum name, or legacy spelling.

        Raises:
            UnknownCategoryError: If ``text`` names no category.
        """
        if isinstance(text, Category):
            return text
        key = str(text).strip()
        normalized = key.lower().replace("-", "_")
        for member in cls:
            if normalized in (member.value, member.name.lower()):
                return member
        if normalized in _LEGACY_ALIASES:
            return cls(_LEGACY_ALIASES[normalized])
        raise UnknownCategoryError(key, [m.value for m in cls])

    def __str__(self) -> str:
        return self.value


_LEGACY_ALIASES = {
    "developerexperience": "devexp",
    "developer_experience": "devexp",
    "dx": "devexp",
}


class ProjectType(str, Enum):
    """Detected kind of project under analysis."""

    REACT_WEBAPP = "react-webapp"
    VUE_WEBAPP = "vue-webapp"
    NODE_API = "node-api"
    TYPESCRIPT = "typescript"
    JAVASCRIPT = "javascript"
    PYTHON_PACKAGE = "python-package"
    PYTHON_APP = "python-app"
    CLI_TOOL = "cli-tool"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ProjectMetadata:
    """Facts about the analyzed project, computed once per run."""

    project_root: str
    project_type: ProjectType
    project_name: str
    version: str = "0.0.0"
    analyzed_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "project_root": self.project_root,
            "project_type": self.project_type.value,
            "project_name": self.project_name,
            "version": self.version,
            "analyzed_at": self.analyzed_at,
        }


@dataclass(frozen=True)
class CategoryDefinition:
    """A weighted scoring dimension."""

    category: Category
    name: str
    max_score: float
    description: str = ""


@dataclass(frozen=True)
class Recommendation:
    """An improvement suggestion with an estimated score impact in points."""

    suggestion: str
    description: str = ""
    impact: float = 0.0
    category: Optional[Category] = None

    @property
    def priority(self) -> str:
        if self.impact >= 3.0:
            return "high"
        if self.impact >= 1.5:
            return "medium"
        return "low"

    def to_dict(self) -> dict[str, Any]:
        return {
            "suggestion": self.suggestion,
            "description": self.description,
            "impact": self.impact,
            "priority": self.priority,
            "category": self.category.value if self.category else None,
        }


@dataclass(frozen=True)
class AnalyzerResult:
    """Raw output of one analyzer for one run."""

    category: Category
    score: float
    max_score: float
    issues: tuple[str, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    metrics: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[str] = None
    duration_seconds: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(
        cls, category: Category, max_score: float, reason: str, duration_seconds: float = 0.0
    ) -> "AnalyzerResult":
        """Result recorded for an analyzer that raised or was cancelled."""
        return cls(
            category=category,
            score=0.0,
            max_score=max_score,
            issues=(f"Analysis failed: {reason}",),
            error=reason,
            duration_seconds=duration_seconds,
        )


@dataclass(frozen=True)
class CategoryScore:
    """Graded score for one category."""

    category: Category
    name: str
    score: float
    max_score: float
    percentage: int
    grade: str
    issues: tuple[str, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    metrics: Mapping[str, Any] = field(default_factory=dict)
    error: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "category": self.category.value,
            "name": self.name,
            "score": self.score,
            "max_score": self.max_score,
            "percentage": self.percentage,
            "grade": self.grade,
            "issues": list(self.issues),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "metrics": dict(self.metrics),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class OverallScore:
    """Aggregate across all active categories."""

    score: float
    max_score: float
    percentage: int
    grade: str
    has_errors: bool = False
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "max_score": self.max_score,
            "percentage": self.percentage,
            "grade": self.grade,
            "has_errors": self.has_errors,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ScoreSummary:
    total_issues: int = 0
    total_recommendations: int = 0
    best_category: Optional[Category] = None
    worst_category: Optional[Category] = None
    needs_attention: tuple[Category, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_issues": self.total_issues,
            "total_recommendations": self.total_recommendations,
            "best_category": self.best_category.value if self.best_category else None,
            "worst_category": self.worst_category.value if self.worst_category else None,
            "needs_attention": [c.value for c in self.needs_attention],
        }


@dataclass(frozen=True)
class ScoreSheet:
    """Output of the score calculator: graded categories plus the overall."""

    categories: Mapping[Category, CategoryScore]
    overall: OverallScore
    summary: ScoreSummary = field(default_factory=ScoreSummary)


@dataclass(frozen=True)
class ScoringResult:
    """The complete, validated-or-not result of a scoring run."""

    metadata: Optional[ProjectMetadata]
    categories: Mapping[Category, CategoryScore]
    overall: Optional[OverallScore]
    recommendations: tuple[Recommendation, ...] = ()
    summary: ScoreSummary = field(default_factory=ScoreSummary)

    def __post_init__(self) -> None:
        object.__setattr__(self, "recommendations", tuple(self.recommendations))

    def category(self, category: "Category | str") -> Optional[CategoryScore]:
        return self.categories.get(Category.parse(category))


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"is_valid": self.is_valid, "errors": list(self.errors)}
