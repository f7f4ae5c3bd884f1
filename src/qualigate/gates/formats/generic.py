"""Generic JSON gate report for any CI system."""

import json
from typing import Any, Optional

from ...config import GatesConfig
from ..models import GatesReport, scope_key
from .base import CIFormat


class GenericFormat(CIFormat):
    """Machine-readable JSON document.

    Scripts typically read ``.passed``, ``.results.overall`` and
    ``.summary.failed`` with jq.
    """

    name = "generic"

    def format(self, report: GatesReport, config: Optional[GatesConfig] = None) -> str:
        data = report.to_dict()
        if config is not None:
            data["config"] = {
                "thresholds": {
                    "overall": config.overall.to_dict(),
                    "categories": {c.value: t.to_dict() for c, t in config.categories.items()},
                },
                "blocking": config.blocking,
            }
        data["recommendations"] = extract_recommendations(report)
        return json.dumps(data, indent=2)


def extract_recommendations(report: GatesReport) -> list[dict[str, Any]]:
    """Suggestions from failed gates (high priority) then warning gates."""
    recommendations: list[dict[str, Any]] = []
    for gate in report.failed_gates:
        for suggestion in gate.suggestions:
            recommendations.append(
                {
                    "type": "fix",
                    "priority": "high",
                    "gate": gate.name,
                    "suggestion": suggestion,
                    "category": scope_key(gate.scope),
                }
            )
    for gate in report.warning_gates:
        for suggestion in gate.suggestions:
            recommendations.append(
                {
                    "type": "improvement",
                    "priority": "medium",
                    "gate": gate.name,
                    "suggestion": suggestion,
                    "category": scope_key(gate.scope),
                }
            )
    return recommendations
