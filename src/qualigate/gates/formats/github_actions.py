"""GitHub Actions output: workflow command annotations and a step summary."""

from typing import Optional

from ...config import GatesConfig
from ..models import GatesReport
from .base import CIFormat, score_text, status_label

_STATUS_ICON = {"PASSED": ":white_check_mark:", "WARNING": ":warning:", "FAILED": ":x:"}


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class GitHubActionsFormat(CIFormat):
    """``::error``/``::warning``/``::notice`` lines followed by markdown.

    The markdown part is also what gets appended to ``$GITHUB_STEP_SUMMARY``.
    """

    name = "github-actions"

    def format(self, report: GatesReport, config: Optional[GatesConfig] = None) -> str:
        return "\n".join([*self.annotations(report), "", self.step_summary(report)])

    def annotations(self, report: GatesReport) -> list[str]:
        lines = []
        for gate in report.gates:
            title = escape_property(f"Quality gate: {gate.name}")
            if not gate.passed:
                level = "error" if gate.block_on_failure else "warning"
                lines.append(f"::{level} title={title}::{escape_data(gate.message)}")
            elif gate.warning:
                lines.append(f"::warning title={title}::{escape_data(gate.message)}")
        level = "notice" if report.passed else "error"
        lines.append(f"::{level} title=Quality gates::{escape_data(report.message)}")
        return lines

    def step_summary(self, report: GatesReport) -> str:
        summary = report.summary
        lines = [
            "## Quality Gates",
            "",
            f"**{report.message}**",
            "",
            f"Passed: {summary.passed} | Failed: {summary.failed} | "
            f"Warnings: {summary.warnings} | Pass rate: {summary.pass_rate:g}%",
            "",
            "| Gate | Score | Minimum | Warning | Status |",
            "|------|------:|--------:|--------:|--------|",
        ]
        for gate in report.gates:
            status = status_label(gate.passed, gate.warning)
            lines.append(
                f"| {gate.name} | {score_text(gate.score)} | {gate.threshold:g} | "
                f"{gate.warning_threshold:g} | {_STATUS_ICON[status]} {status} |"
            )

        failed = [g for g in report.failed_gates if g.issues]
        if failed:
            lines.extend(["", "### Issues"])
            for gate in failed:
                lines.append(f"- **{gate.name}**")
                lines.extend(f"  - {issue}" for issue in gate.issues[:5])
        return "\n".join(lines) + "\n"
