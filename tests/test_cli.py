"""Tests for the typer command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from qualigate import __version__
from qualigate.cli import app

runner = CliRunner()

CI_VARIABLES = ("GITHUB_ACTIONS", "GITHUB_STEP_SUMMARY", "GITHUB_OUTPUT", "GITLAB_CI", "JENKINS_URL")


@pytest.fixture(autouse=True)
def clean_environment(isolated_home, monkeypatch):
    for name in CI_VARIABLES:
        monkeypatch.delenv(name, raising=False)


class TestMain:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"Qualigate version {__version__}" in result.output

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "gates" in result.output


class TestCategoriesCommand:
    def test_json(self):
        result = runner.invoke(app, ["categories", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["overall"] == {"min": 70, "warning": 80, "block_on_failure": True}
        assert [c["key"] for c in data["categories"]] == [
            "structure",
            "quality",
            "performance",
            "testing",
            "security",
            "devexp",
            "completeness",
        ]
        assert sum(c["weight"] for c in data["categories"]) == 100

    def test_table(self):
        result = runner.invoke(app, ["categories"])
        assert result.exit_code == 0
        assert "Developer Experience" in result.output


class TestScoreCommand:
    def test_console(self, sample_project):
        result = runner.invoke(app, ["score", str(sample_project), "--quiet"])
        assert result.exit_code == 0
        assert "Quality Score" in result.output
        assert "98.5/100" in result.output

    def test_json_output_file(self, sample_project, tmp_path):
        target = tmp_path / "report.json"
        result = runner.invoke(
            app, ["score", str(sample_project), "--format", "json", "--output", str(target)]
        )
        assert result.exit_code == 0
        assert "Report written to" in result.output
        data = json.loads(target.read_text())
        assert data["overall"]["score"] == 98.5
        assert data["overall"]["grade"] == "A+"
        assert data["metadata"]["project_name"] == "sample-app"

    def test_categories_and_no_recommendations(self, sample_project, tmp_path):
        target = tmp_path / "report.json"
        result = runner.invoke(
            app,
            [
                "score",
                str(sample_project),
                "--categories",
                "devexp",
                "--no-recommendations",
                "-f",
                "json",
                "-o",
                str(target),
            ],
        )
        assert result.exit_code == 0
        data = json.loads(target.read_text())
        assert list(data["categories"]) == ["devexp"]
        assert data["overall"]["max_score"] == 10
        assert "recommendations" not in data

    def test_html_output_file(self, sample_project, tmp_path):
        target = tmp_path / "report.html"
        result = runner.invoke(
            app, ["score", str(sample_project), "-f", "html", "-o", str(target), "-q"]
        )
        assert result.exit_code == 0
        assert "<html" in target.read_text().lower()

    def test_unknown_category(self, sample_project):
        result = runner.invoke(app, ["score", str(sample_project), "--categories", "speed"])
        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_log_file(self, sample_project, tmp_path):
        log_file = tmp_path / "run.log"
        report = tmp_path / "report.txt"
        result = runner.invoke(
            app,
            ["score", str(sample_project), "-q", "--log-file", str(log_file), "-o", str(report)],
        )
        assert result.exit_code == 0
        assert "Running 7 analyzers" in log_file.read_text()

    def test_missing_path(self, tmp_path):
        result = runner.invoke(app, ["score", str(tmp_path / "missing")])
        assert result.exit_code != 0

    def test_config_file(self, sample_project, tmp_path):
        config = tmp_path / "custom.toml"
        config.write_text('categories = ["quality"]\n')
        target = tmp_path / "report.json"
        result = runner.invoke(
            app,
            ["score", str(sample_project), "-c", str(config), "-f", "json", "-o", str(target)],
        )
        assert result.exit_code == 0
        assert list(json.loads(target.read_text())["categories"]) == ["quality"]


class TestGatesCommand:
    def test_passing_project(self, sample_project):
        result = runner.invoke(app, ["gates", str(sample_project), "--format", "console"])
        assert result.exit_code == 0
        assert "Quality gates PASSED (8/8 gates passed)" in result.output

    def test_failing_project_blocks(self, bare_project, tmp_path):
        target = tmp_path / "gates.json"
        result = runner.invoke(
            app, ["gates", str(bare_project), "--format", "generic", "--output", str(target)]
        )
        assert result.exit_code == 1
        assert "blocking deployment" in result.output
        data = json.loads(target.read_text())
        assert data["passed"] is False
        assert data["results"]["overall"] == 43

    def test_non_blocking(self, bare_project):
        result = runner.invoke(
            app, ["gates", str(bare_project), "--format", "console", "--blocking", "false"]
        )
        assert result.exit_code == 0
        assert "Quality gates FAILED" in result.output

    def test_thresholds_override(self, bare_project):
        thresholds = json.dumps(
            {
                "overall": {"min": 40, "warning": 50},
                "categories": {"security": {"min": 5, "warning": 10}},
            }
        )
        result = runner.invoke(
            app,
            [
                "gates",
                str(bare_project),
                "--format",
                "console",
                "--categories",
                "structure,security",
                "--thresholds",
                thresholds,
            ],
        )
        assert result.exit_code == 0
        assert "[PASSED] Overall Quality Score: 29/14" in result.output
        assert "[WARNING] Security & Error Handling: 9/5" in result.output

    def test_malformed_thresholds(self, bare_project):
        result = runner.invoke(
            app, ["gates", str(bare_project), "--thresholds", "{overall: 70"]
        )
        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_unknown_category(self, bare_project):
        result = runner.invoke(app, ["gates", str(bare_project), "--categories", "bogus"])
        assert result.exit_code == 2

    def test_jenkins_report_file(self, sample_project, tmp_path):
        target = tmp_path / "reports" / "quality-gates.xml"
        result = runner.invoke(
            app, ["gates", str(sample_project), "--format", "jenkins", "--output", str(target)]
        )
        assert result.exit_code == 0
        assert target.read_text().startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "Summary: 8/8 passed" in result.output

    def test_auto_detects_github(self, sample_project, tmp_path, monkeypatch):
        summary = tmp_path / "summary.md"
        monkeypatch.setenv("GITHUB_ACTIONS", "true")
        monkeypatch.setenv("GITHUB_STEP_SUMMARY", str(summary))
        result = runner.invoke(app, ["gates", str(sample_project)])
        assert result.exit_code == 0
        assert "::notice title=Quality gates::Quality gates PASSED" in result.output
        assert "## Quality Gates" in summary.read_text()

    def test_gates_config_from_project_file(self, bare_project):
        (bare_project / "qualigate.toml").write_text(
            "[gates]\n"
            'ci_format = "console"\n'
            "blocking = false\n"
        )
        result = runner.invoke(app, ["gates", str(bare_project)])
        assert result.exit_code == 0
        assert "Quality gates FAILED" in result.output
