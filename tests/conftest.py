"""Shared test fixtures for Qualigate tests."""

import os
from functools import partial
from pathlib import Path

import pytest

from qualigate.analyzers import AnalyzerRegistry
from qualigate.models import (
    AnalyzerResult,
    Category,
    ProjectMetadata,
    ProjectType,
    Recommendation,
)
from qualigate.scoring import ResultsProcessor, ScoreCalculator

TIMESTAMP = "2026-01-01T00:00:00+00:00"

# 68/100 -> D+
SCENARIO_SCORES = {
    Category.STRUCTURE: 18,
    Category.QUALITY: 12,
    Category.PERFORMANCE: 10,
    Category.TESTING: 8,
    Category.SECURITY: 10,
    Category.DEVEXP: 7,
    Category.COMPLETENESS: 3,
}


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class FixedAnalyzer:
    """Returns a fixed score, optionally with issues and recommendations."""

    def __init__(self, category, score, issues=(), recommendations=()):
        self.category = category
        self.score = score
        self.issues = issues
        self.recommendations = recommendations

    def run(self, context):
        return AnalyzerResult(
            category=self.category,
            score=self.score,
            max_score=context.max_score,
            issues=self.issues,
            recommendations=self.recommendations,
        )


class RaisingAnalyzer:
    def __init__(self, category, message):
        self.category = category
        self.message = message

    def run(self, context):
        raise RuntimeError(self.message)


def fixed_registry(scores=None, overrides=None):
    """Registry of FixedAnalyzers; ``overrides`` maps category -> factory."""
    scores = scores or SCENARIO_SCORES
    overrides = overrides or {}
    registry = AnalyzerRegistry()
    for category in Category:
        if category in overrides:
            registry.register(category, overrides[category])
        elif category in scores:
            registry.register(category, partial(FixedAnalyzer, category, scores[category]))
    return registry


def make_metadata(root="/tmp/demo"):
    return ProjectMetadata(
        project_root=str(root),
        project_type=ProjectType.PYTHON_PACKAGE,
        project_name="demo",
        version="1.2.3",
        analyzed_at=TIMESTAMP,
    )


def make_raw_results(scores=None, errors=None, recommendations=None, issues=None):
    """AnalyzerResults keyed by category, with each category's default weight."""
    from qualigate.categories import CATEGORY_DEFINITIONS

    scores = SCENARIO_SCORES if scores is None else scores
    errors = errors or {}
    recommendations = recommendations or {}
    issues = issues or {}
    results = {}
    for category, score in scores.items():
        max_score = CATEGORY_DEFINITIONS[category].max_score
        if category in errors:
            results[category] = AnalyzerResult.failure(category, max_score, errors[category])
        else:
            results[category] = AnalyzerResult(
                category=category,
                score=score,
                max_score=max_score,
                issues=issues.get(category, ()),
                recommendations=recommendations.get(category, ()),
            )
    return results


def make_result(scores=None, errors=None, recommendations=None, issues=None, config=None):
    """A complete ScoringResult built through the real calculator and processor."""
    metadata = make_metadata()
    raw = make_raw_results(scores, errors, recommendations, issues)
    sheet = ScoreCalculator().calculate(raw, metadata)
    return ResultsProcessor(config).build(metadata, sheet)


def rec(suggestion, impact, category=Category.QUALITY, description=""):
    return Recommendation(
        suggestion=suggestion, description=description, impact=impact, category=category
    )


@pytest.fixture
def scenario_result():
    """The 68/100 scenario result with a few issues and recommendations."""
    return make_result(
        issues={
            Category.QUALITY: ("No linter configuration found",),
            Category.TESTING: ("Low test-to-source ratio",),
        },
        recommendations={
            Category.QUALITY: (rec("Add a linter configuration", 6.0),),
            Category.DEVEXP: (rec("Add a CONTRIBUTING guide", 1.5, Category.DEVEXP),),
        },
    )


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory and clear QUALIGATE_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("QUALIGATE_"):
            monkeypatch.delenv(key)
    return home


def _write(root: Path, rel: str, content: str = "") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def sample_project(tmp_path):
    """A small, well-kept Python project."""
    root = tmp_path / "sample"
    root.mkdir()
    _write(
        root,
        "pyproject.toml",
        '[project]\n'
        'name = "sample-app"\n'
        'version = "2.1.0"\n'
        'description = "Sample application"\n'
        'license = {text = "MIT"}\n'
        'urls = {Homepage = "https://example.com"}\n'
        "\n"
        "[project.scripts]\n"
        'sample = "app.cli:main"\n'
        "\n"
        "[tool.ruff]\n"
        "line-length = 100\n"
        "\n"
        "[tool.mypy]\n"
        "strict = true\n"
        "\n"
        "[tool.pytest.ini_options]\n"
        'testpaths = ["tests"]\n'
        "\n"
        "[tool.coverage.run]\n"
        "branch = true\n",
    )
    _write(root, "src/app/__init__.py", '"""Sample app."""\n')
    _write(
        root,
        "src/app/core.py",
        "from functools import lru_cache\n\n\n"
        "@lru_cache(maxsize=None)\n"
        "def double(x):\n"
        "    return x * 2\n",
    )
    _write(root, "tests/test_core.py", "def test_double():\n    assert True\n")
    _write(
        root,
        "README.md",
        "# Sample\n\n## Install\n\npip install sample\n\n## Usage\n\nRun it.\n\n## Example\n\nsample\n",
    )
    _write(root, "LICENSE", "MIT License\n")
    _write(root, "CHANGELOG.md", "# Changelog\n")
    _write(root, ".gitignore", ".env\nnode_modules/\n__pycache__/\n*.pem\n*.key\n")
    _write(root, ".editorconfig", "root = true\n")
    _write(root, ".github/workflows/ci.yml", "name: ci\n")
    _write(root, "Dockerfile", "FROM python:3.12-slim\n")
    _write(root, "uv.lock", "version = 1\n")
    _write(root, "node_modules/left-pad/index.js", "// TODO FIXME XXX\n" * 50)
    return root


@pytest.fixture
def bare_project(tmp_path):
    """A directory holding a single script and nothing else."""
    root = tmp_path / "bare"
    root.mkdir()
    _write(root, "main.py", "print('hello')\n")
    return root
