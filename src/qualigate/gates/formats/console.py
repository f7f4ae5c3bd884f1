"""Plain-text gate report for terminals and log files."""

from typing import Optional

from ...config import GatesConfig
from ..models import GatesReport
from .base import CIFormat, score_text, status_label

MAX_ISSUES_PER_GATE = 3


class ConsoleFormat(CIFormat):
    name = "console"

    def format(self, report: GatesReport, config: Optional[GatesConfig] = None) -> str:
        lines = [report.message]
        summary = report.summary
        if not report.enabled:
            return "\n".join(lines)

        lines.append(
            f"Summary: {summary.passed}/{summary.total} passed, {summary.failed} failed, "
            f"{summary.warnings} warning(s) ({summary.pass_rate:g}% pass rate)"
        )
        lines.append("")
        lines.append("Gates:")
        for gate in report.gates:
            flag = "" if gate.block_on_failure else " (non-blocking)"
            lines.append(
                f"  [{status_label(gate.passed, gate.warning)}] {gate.name}: "
                f"{score_text(gate.score, gate.threshold)}{flag}"
            )

        failed = report.failed_gates
        if failed:
            lines.append("")
            lines.append("Failed gates:")
            for gate in failed:
                lines.append(f"  {gate.name}: {gate.message}")
                for issue in gate.issues[:MAX_ISSUES_PER_GATE]:
                    lines.append(f"    - {issue}")

        warned = report.warning_gates
        if warned:
            lines.append("")
            lines.append("Warnings:")
            for gate in warned:
                lines.append(f"  {gate.name}: {gate.message}")

        return "\n".join(lines)
