"""GitLab CI output: Code Quality report JSON."""

import hashlib
import json
from typing import Any, Optional

from ...config import GatesConfig
from ..models import GateResult, GatesReport, scope_key
from .base import CIFormat

REPORT_PATH = "qualigate.toml"


class GitLabCIFormat(CIFormat):
    """A Code Quality report listing failed and warning gates.

    GitLab requires a location for every entry; gates are not tied to a
    source line, so entries point at the gate configuration file.
    """

    name = "gitlab-ci"

    def format(self, report: GatesReport, config: Optional[GatesConfig] = None) -> str:
        entries = [_entry(g) for g in report.gates if not g.passed or g.warning]
        return json.dumps(entries, indent=2)


def _severity(gate: GateResult) -> str:
    if not gate.passed:
        return "major" if gate.block_on_failure else "minor"
    return "info"


def _entry(gate: GateResult) -> dict[str, Any]:
    check = f"quality-gate-{scope_key(gate.scope)}"
    description = gate.message
    if gate.issues:
        description += "; " + "; ".join(gate.issues[:3])
    return {
        "description": description,
        "check_name": check,
        "fingerprint": hashlib.md5(check.encode("utf-8")).hexdigest(),
        "severity": _severity(gate),
        "location": {"path": REPORT_PATH, "lines": {"begin": 1}},
    }
