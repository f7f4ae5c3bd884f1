"""Configuration exceptions: categories, thresholds, paths, output formats."""

from pathlib import Path
from typing import Any, Iterable

from .base import QualigateError


class ConfigurationError(QualigateError):
    """Base class for configuration-related errors.

    Configuration errors are fatal: they are raised before any analyzer runs.
    """

    exit_code = 2


class UnknownCategoryError(ConfigurationError):
    """Raised when a requested category is not registered."""

    def __init__(self, category: str, available: Iterable[str]):
        available = list(available)
        super().__init__(
            f"Unknown category: {category}",
            details={"category": category, "available": ", ".join(available)},
        )
        self.category = category
        self.available = available


class InvalidThresholdError(ConfigurationError):
    """Raised when a gate threshold is malformed (e.g. warning below minimum)."""

    def __init__(self, scope: str, reason: str):
        super().__init__(
            f"Invalid threshold for {scope}",
            details={"scope": scope, "reason": reason},
        )
        self.scope = scope
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class UnsupportedFormatError(ConfigurationError):
    """Raised when an output format is not recognized."""

    def __init__(self, format_name: str, supported: Iterable[str]):
        supported = sorted(supported)
        super().__init__(
            f"Unsupported format: {format_name}",
            details={"format": format_name, "supported": ", ".join(supported)},
        )
        self.format_name = format_name
        self.supported = supported
