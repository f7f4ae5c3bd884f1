"""Output formatters for Qualigate score reports."""

from .base import BaseFormatter
from .html_formatter import HtmlFormatter
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter

FORMATTERS = {
    "console": RichFormatter,
    "json": JsonFormatter,
    "html": HtmlFormatter,
}


def get_formatter(name: str, detailed: bool = False, show_recommendations: bool = True) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "console", "json", "html"

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls(detailed=detailed, show_recommendations=show_recommendations)


__all__ = [
    "BaseFormatter",
    "RichFormatter",
    "JsonFormatter",
    "HtmlFormatter",
    "FORMATTERS",
    "get_formatter",
]
