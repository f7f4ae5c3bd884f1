"""Base exception for Qualigate."""

from typing import Any, Dict, Optional


class QualigateError(Exception):
    """Base exception for all Qualigate errors.

    ``exit_code`` is the process status the CLI exits with when this error
    reaches it.
    """

    exit_code = 1

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
