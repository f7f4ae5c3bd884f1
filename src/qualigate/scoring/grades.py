"""Percentage rounding and the letter grade table."""

import math

# Highest threshold wins.
GRADE_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (98, "A+"),
    (93, "A"),
    (90, "A-"),
    (87, "B+"),
    (83, "B"),
    (80, "B-"),
    (77, "C+"),
    (73, "C"),
    (70, "C-"),
    (67, "D+"),
    (65, "D"),
    (60, "D-"),
)

FAILING_GRADE = "F"


def grade_for(percentage: float) -> str:
    """Letter grade for a 0-100 percentage.

    >>> grade_for(98), grade_for(97.9), grade_for(59.99)
    ('A+', 'A', 'F')
    """
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return FAILING_GRADE


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive input."""
    return int(math.floor(value + 0.5))


def ratio_percentage(score: float, max_score: float) -> float:
    """Unrounded ``score / max_score * 100``; 0 when ``max_score`` is 0."""
    if max_score <= 0:
        return 0.0
    return score * 100 / max_score


def percentage(score: float, max_score: float) -> int:
    """Rounded percentage clamped into [0, 100]."""
    return min(100, max(0, round_half_up(ratio_percentage(score, max_score))))
