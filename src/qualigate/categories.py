"""Category weights and display names.

The default weights sum to 100 so that a full run scores out of 100 points:

    structure 20, quality 20, performance 15, testing 15,
    security 15, devexp 10, completeness 5
"""

from __future__ import annotations

from typing import Iterable

from .models import Category, CategoryDefinition

DEFAULT_CATEGORIES: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        Category.STRUCTURE,
        "Code Structure & Architecture",
        20,
        "Source layout, file sizes and directory depth",
    ),
    CategoryDefinition(
        Category.QUALITY,
        "Code Quality & Maintainability",
        20,
        "Linting, formatting, type checking and leftover markers",
    ),
    CategoryDefinition(
        Category.PERFORMANCE,
        "Performance & Optimization",
        15,
        "Oversized sources and bundles, lockfiles, caching",
    ),
    CategoryDefinition(
        Category.TESTING,
        "Testing & Documentation",
        15,
        "Test suite presence, test ratio, runner and coverage setup",
    ),
    CategoryDefinition(
        Category.SECURITY,
        "Security & Error Handling",
        15,
        "Committed secrets, environment files, ignore rules",
    ),
    CategoryDefinition(
        Category.DEVEXP,
        "Developer Experience",
        10,
        "README, contributing guide, editor config, CI",
    ),
    CategoryDefinition(
        Category.COMPLETENESS,
        "Completeness & Production Readiness",
        5,
        "Unfinished code, license, changelog, deployment config",
    ),
)

CATEGORY_DEFINITIONS: dict[Category, CategoryDefinition] = {
    d.category: d for d in DEFAULT_CATEGORIES
}


def get_definition(category: Category | str) -> CategoryDefinition:
    return CATEGORY_DEFINITIONS[Category.parse(category)]


def display_name(category: Category | str) -> str:
    return get_definition(category).name


def total_weight(categories: Iterable[Category]) -> float:
    """Sum of maximum points over ``categories``."""
    return sum(CATEGORY_DEFINITIONS[c].max_score for c in categories)
