"""Configuration loading and management for Qualigate.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in ScoringConfig)
    2. Global config (~/.qualigate.toml)
    3. Project config (<project>/qualigate.toml)
    4. Explicit config file
    5. Environment variables (QUALIGATE_* prefix)
    6. Keyword overrides (typically CLI flags)

Example:
    >>> config = load_config(verbose=True, categories="quality,testing")
    >>> config.verbosity
    'verbose'
    >>> [c.value for c in config.categories]
    ['quality', 'testing']
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping, Optional, Union, get_type_hints

from .exceptions import (
    ConfigurationError,
    InvalidConfigError,
    InvalidThresholdError,
    QualigateError,
)
from .models import Category, ProjectType

Verbosity = Literal["quiet", "normal", "verbose"]

CI_FORMATS = ("auto", "github-actions", "gitlab-ci", "jenkins", "generic", "console")

ENV_PREFIX = "QUALIGATE_"


@dataclass(frozen=True)
class GateThreshold:
    """Minimum and warning levels for one gate, in points.

    A score below ``minimum`` fails the gate; a passing score below
    ``warning`` passes with a warning.
    """

    minimum: float
    warning: float
    block_on_failure: bool = True

    def __post_init__(self) -> None:
        if self.minimum < 0:
            raise InvalidThresholdError("threshold", f"minimum must be >= 0, got {self.minimum}")
        if self.warning < self.minimum:
            raise InvalidThresholdError(
                "threshold",
                f"warning ({self.warning}) must be >= minimum ({self.minimum})",
            )

    def scaled(self, factor: float) -> "GateThreshold":
        return GateThreshold(
            minimum=round(self.minimum * factor, 2),
            warning=round(self.warning * factor, 2),
            block_on_failure=self.block_on_failure,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.minimum,
            "warning": self.warning,
            "block_on_failure": self.block_on_failure,
        }


# Minimums scaled to each category's weight (e.g. quality 15/18 of 20).
DEFAULT_OVERALL_THRESHOLD = GateThreshold(minimum=70, warning=80)

DEFAULT_CATEGORY_THRESHOLDS: Mapping[Category, GateThreshold] = {
    Category.STRUCTURE: GateThreshold(minimum=15, warning=18),
    Category.QUALITY: GateThreshold(minimum=15, warning=18),
    Category.PERFORMANCE: GateThreshold(minimum=10, warning=12),
    Category.TESTING: GateThreshold(minimum=10, warning=12),
    Category.SECURITY: GateThreshold(minimum=12, warning=14),
    Category.DEVEXP: GateThreshold(minimum=7, warning=9),
    Category.COMPLETENESS: GateThreshold(minimum=3, warning=4),
}


@dataclass(frozen=True)
class GatesConfig:
    """Quality gate policy.

    Attributes:
        enabled: Evaluate gates at all
        overall: Threshold applied to the overall score
        categories: Per-category thresholds; categories without one get no gate
        ci_format: Output format for CI emission ("auto" detects from env)
        blocking: Exit non-zero when a blocking gate fails
        set_environment: Export QUALITY_GATES_* variables after evaluation
        environment_prefix: Prefix for exported variables
    """

    enabled: bool = True
    overall: GateThreshold = DEFAULT_OVERALL_THRESHOLD
    categories: Mapping[Category, GateThreshold] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_THRESHOLDS)
    )
    ci_format: str = "auto"
    blocking: bool = True
    set_environment: bool = False
    environment_prefix: str = "QUALITY_GATES_"

    def __post_init__(self) -> None:
        object.__setattr__(self, "overall", parse_threshold("overall", self.overall))
        object.__setattr__(
            self,
            "categories",
            {Category.parse(k): parse_threshold(str(k), v) for k, v in self.categories.items()},
        )
        if self.ci_format not in CI_FORMATS:
            raise InvalidConfigError(
                "ci_format", self.ci_format, f"expected one of {', '.join(CI_FORMATS)}"
            )
        if not self.environment_prefix:
            raise InvalidConfigError("environment_prefix", self.environment_prefix, "must not be empty")


@dataclass(frozen=True)
class ScoringConfig:
    """Configuration for one scoring run.

    Built once and passed by reference into the orchestrator, calculator,
    results processor and gates.

    Attributes:
        categories: Categories to score, in any order (output follows registry order)
        max_concurrency: Upper bound on analyzers running at the same time
        timeout_seconds: Deadline for the whole analyzer fan-out
        verbosity: Logging verbosity level
        include_recommendations: Aggregate recommendations into the result
        max_recommendations: Cap on the aggregated recommendation list
        project_type: Force a project type instead of detecting it
        max_file_size_mb: Files larger than this are ignored by analyzers
        extra_skip_dirs: Directory names skipped in addition to the defaults
        gates: Quality gate policy
    """

    categories: tuple[Category, ...] = tuple(Category)
    max_concurrency: int = 4
    timeout_seconds: float = 300.0
    verbosity: Verbosity = "normal"
    include_recommendations: bool = True
    max_recommendations: int = 25
    project_type: Optional[ProjectType] = None
    max_file_size_mb: float = 2.0
    extra_skip_dirs: tuple[str, ...] = ()
    gates: GatesConfig = field(default_factory=GatesConfig)

    def __post_init__(self) -> None:
        if not self.categories:
            raise InvalidConfigError("categories", self.categories, "at least one category is required")
        object.__setattr__(self, "categories", parse_categories(self.categories))
        if self.max_concurrency < 1:
            raise InvalidConfigError("max_concurrency", self.max_concurrency, "must be at least 1")
        if self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")
        if self.max_recommendations < 0:
            raise InvalidConfigError("max_recommendations", self.max_recommendations, "must be non-negative")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")

    @property
    def verbose(self) -> bool:
        return self.verbosity == "verbose"

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


def parse_categories(value: Union[None, str, Iterable[Any]]) -> tuple[Category, ...]:
    """Parse ``"all"``, a comma-separated string, or an iterable of keys.

    Order is preserved and duplicates are dropped.

    Raises:
        UnknownCategoryError: If any key names no category
    """
    if value is None:
        return tuple(Category)
    if isinstance(value, str):
        items = [part for part in (p.strip() for p in value.split(",")) if part]
    else:
        items = list(value)
    if not items or any(str(item).strip().lower() == "all" for item in items):
        return tuple(Category)

    parsed: list[Category] = []
    for item in items:
        category = Category.parse(item)
        if category not in parsed:
            parsed.append(category)
    return tuple(parsed)


def parse_threshold(scope: str, data: Any) -> GateThreshold:
    """Build a GateThreshold from a ``{"min": .., "warning": ..}`` mapping."""
    if isinstance(data, GateThreshold):
        return data
    if not isinstance(data, Mapping):
        raise InvalidThresholdError(scope, f"expected a table/object, got {type(data).__name__}")

    unknown = set(data) - {"min", "minimum", "warning", "warn", "block_on_failure", "blockOnFailure"}
    if unknown:
        raise InvalidThresholdError(scope, f"unknown keys: {', '.join(sorted(unknown))}")

    minimum = data.get("min", data.get("minimum"))
    if minimum is None:
        raise InvalidThresholdError(scope, "missing 'min'")
    warning = data.get("warning", data.get("warn", minimum))
    block = data.get("block_on_failure", data.get("blockOnFailure", True))

    try:
        minimum = float(minimum)
        warning = float(warning)
    except (TypeError, ValueError):
        raise InvalidThresholdError(scope, "min and warning must be numbers")
    if not isinstance(block, bool):
        raise InvalidThresholdError(scope, "block_on_failure must be true or false")

    try:
        return GateThreshold(minimum=minimum, warning=warning, block_on_failure=block)
    except InvalidThresholdError as e:
        raise InvalidThresholdError(scope, e.reason)


def parse_thresholds(
    thresholds: Union[str, Mapping[str, Any]], base: Optional[GatesConfig] = None
) -> GatesConfig:
    """Merge a thresholds document (JSON text or mapping) over ``base``.

    Shape::

        {"overall": {"min": 70, "warning": 80},
         "categories": {"quality": {"min": 15, "warning": 18}}}

    Category thresholds given here replace the base value for that category;
    categories not mentioned keep their base threshold.

    Raises:
        ConfigurationError: If the document is malformed
    """
    base = base or GatesConfig()
    if isinstance(thresholds, str):
        try:
            data = json.loads(thresholds)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Malformed thresholds JSON: {e}")
    else:
        data = thresholds

    if not isinstance(data, Mapping):
        raise ConfigurationError("Thresholds must be a JSON object")

    unknown = set(data) - {"overall", "categories"}
    if unknown:
        raise ConfigurationError(f"Unknown threshold sections: {', '.join(sorted(unknown))}")

    overall = base.overall
    if "overall" in data:
        overall = parse_threshold("overall", data["overall"])

    categories = dict(base.categories)
    raw_categories = data.get("categories", {})
    if not isinstance(raw_categories, Mapping):
        raise ConfigurationError("Threshold 'categories' must be an object")
    for key, value in raw_categories.items():
        category = Category.parse(key)
        categories[category] = parse_threshold(category.value, value)

    return replace(base, overall=overall, categories=categories)


def load_config(
    config_file: Optional[Path] = None,
    project_root: Optional[Path] = None,
    **overrides,
) -> ScoringConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        project_root: Directory searched for ``qualigate.toml`` (default: cwd)
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated ScoringConfig instance

    Raises:
        ConfigurationError: If any source is malformed
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".qualigate.toml"
    if global_config.exists():
        merged.update(_load_file(global_config, "global config"))

    project_config = Path(project_root or Path.cwd()) / "qualigate.toml"
    if project_config.exists():
        merged.update(_load_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_file(config_file, "config file"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "categories" in merged:
        merged["categories"] = parse_categories(merged["categories"])
    if merged.get("project_type") is not None and not isinstance(merged["project_type"], ProjectType):
        try:
            merged["project_type"] = ProjectType(merged["project_type"])
        except ValueError:
            raise InvalidConfigError(
                "project_type",
                merged["project_type"],
                f"expected one of {', '.join(t.value for t in ProjectType)}",
            )
    if "extra_skip_dirs" in merged:
        merged["extra_skip_dirs"] = tuple(merged["extra_skip_dirs"])

    gates = merged.pop("gates", None)
    if gates is not None:
        merged["gates"] = _build_gates_config(gates)

    try:
        return ScoringConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _build_gates_config(data: Any) -> GatesConfig:
    """Turn a ``[gates]`` TOML table into a GatesConfig."""
    if isinstance(data, GatesConfig):
        return data
    if not isinstance(data, Mapping):
        raise ConfigurationError("[gates] must be a table")

    data = dict(data)
    thresholds = {k: data.pop(k) for k in ("overall", "categories") if k in data}
    try:
        base = GatesConfig(**data)
    except TypeError as e:
        raise ConfigurationError(f"Invalid [gates] config: {e}")
    return parse_thresholds(thresholds, base) if thresholds else base


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from QUALIGATE_* environment variables.

    Supported environment variables:
        QUALIGATE_CATEGORIES: comma-separated list or "all"
        QUALIGATE_MAX_CONCURRENCY: int
        QUALIGATE_TIMEOUT_SECONDS: float
        QUALIGATE_VERBOSITY: quiet/normal/verbose
        QUALIGATE_INCLUDE_RECOMMENDATIONS: bool (true/false/1/0)
        QUALIGATE_MAX_RECOMMENDATIONS: int
        QUALIGATE_PROJECT_TYPE: project type value
        QUALIGATE_MAX_FILE_SIZE_MB: float

    Returns:
        Dict of field_name -> parsed_value for any QUALIGATE_* vars found.
    """
    type_hints = get_type_hints(ScoringConfig)

    result: dict[str, Any] = {}

    for field_name in ScoringConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        if field_name == "categories":
            result[field_name] = env_value
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot be expressed as a single string
    (nested config, tuples).
    """
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple or type_hint is tuple:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is ProjectType:
        return value

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_file(path: Path, label: str) -> dict:
    try:
        return load_toml_file(path)
    except QualigateError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
