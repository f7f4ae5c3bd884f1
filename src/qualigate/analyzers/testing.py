"""Testing analyzer: test suite presence, test ratio, runner and coverage."""

from __future__ import annotations

import json

from ..models import AnalyzerResult, Category
from .base import AnalyzerContext, ScoreCard

TEST_DIRS = ("tests", "test", "__tests__", "spec", "e2e")
RUNNER_CONFIGS = (
    "pytest.ini",
    "tox.ini",
    "noxfile.py",
    "jest.config.js",
    "jest.config.ts",
    "vitest.config.ts",
    "vitest.config.js",
    "karma.conf.js",
    ".mocharc.json",
    ".mocharc.yml",
    "playwright.config.ts",
    "cypress.config.ts",
)
COVERAGE_CONFIGS = (".coveragerc", ".nycrc", ".nycrc.json", "codecov.yml", ".codecov.yml")

# A 1:2 test-to-source ratio earns the full ratio points.
TARGET_RATIO = 0.5


class TestingAnalyzer:
    """Checks (internal points out of 100):

        test directory or test files     25
        test-to-source file ratio        35
        test runner configured           20
        coverage configured              20
    """

    __test__ = False

    category = Category.TESTING

    def run(self, context: AnalyzerContext) -> AnalyzerResult:
        card = ScoreCard(self.category, context.max_score)
        files = context.files
        tests = files.test_files()
        sources = files.source_files()
        card.metrics["test_files"] = len(tests)
        card.metrics["source_files"] = len(sources)

        if tests or files.exists(*TEST_DIRS):
            card.award(25)
        else:
            card.miss(
                25,
                "No tests found",
                "Add an automated test suite",
                "Start with tests for the most critical code paths.",
            )

        ratio = len(tests) / len(sources) if sources else 0.0
        card.metrics["test_ratio"] = round(ratio, 2)
        card.partial(35, ratio / TARGET_RATIO)
        if sources and ratio < TARGET_RATIO:
            card.issue(f"Low test-to-source ratio ({len(tests)} tests for {len(sources)} sources)")
            card.recommend(
                "Increase test coverage of source modules",
                "Aim for at least one test file per two source files.",
                35 * (1 - ratio / TARGET_RATIO),
            )

        context.check_cancelled(self.category)

        package_json = self._package_json(context)
        tools = files.read_text("pyproject.toml") + files.read_text("setup.cfg")
        scripts = package_json.get("scripts") or {}
        has_runner = (
            files.exists(*RUNNER_CONFIGS)
            or "[tool.pytest" in tools
            or "jest" in package_json
            or bool(scripts.get("test"))
        )
        card.metrics["runner"] = has_runner
        if has_runner:
            card.award(20)
        else:
            card.miss(20, "No test runner configured", "Configure a test runner")

        has_coverage = (
            files.exists(*COVERAGE_CONFIGS)
            or "[tool.coverage" in tools
            or "coverageThreshold" in files.read_text("package.json")
            or "coverage" in str(scripts.get("test", ""))
        )
        card.metrics["coverage"] = has_coverage
        if has_coverage:
            card.award(20)
        else:
            card.miss(
                20,
                "No coverage reporting configured",
                "Track code coverage",
                "Coverage reports show which code paths the tests never reach.",
            )

        return card.result()

    @staticmethod
    def _package_json(context: AnalyzerContext) -> dict:
        text = context.files.read_text("package.json")
        if not text:
            return {}
        try:
            data = json.loads(text)
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
