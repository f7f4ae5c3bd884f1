"""Quality gates: threshold evaluation and CI emission."""

from .ci import CIOutput, detect_ci_format, generate_ci_output, set_environment_variables
from .engine import OVERALL_GATE_NAME, QualityGates, build_gate_definitions
from .formats import CI_FORMAT_CLASSES, get_ci_format
from .models import OVERALL, GateDefinition, GateResult, GatesReport, GateSummary

__all__ = [
    "OVERALL",
    "OVERALL_GATE_NAME",
    "GateDefinition",
    "GateResult",
    "GateSummary",
    "GatesReport",
    "QualityGates",
    "build_gate_definitions",
    "CIOutput",
    "CI_FORMAT_CLASSES",
    "detect_ci_format",
    "generate_ci_output",
    "get_ci_format",
    "set_environment_variables",
]
