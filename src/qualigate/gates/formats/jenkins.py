"""Jenkins output: JUnit XML with one test case per gate."""

import xml.etree.ElementTree as ET
from typing import Optional

from ...config import GatesConfig
from ..models import GatesReport, scope_key
from .base import CIFormat


class JenkinsFormat(CIFormat):
    name = "jenkins"

    def format(self, report: GatesReport, config: Optional[GatesConfig] = None) -> str:
        summary = report.summary
        suites = ET.Element("testsuites", name="Quality Gates")
        suite = ET.SubElement(
            suites,
            "testsuite",
            name="qualigate.gates",
            tests=str(summary.total),
            failures=str(summary.failed),
            errors="0",
            skipped="0",
            timestamp=report.timestamp,
        )
        for gate in report.gates:
            case = ET.SubElement(
                suite, "testcase", classname=f"qualigate.gates.{scope_key(gate.scope)}", name=gate.name
            )
            if not gate.passed:
                failure = ET.SubElement(
                    case,
                    "failure",
                    message=gate.message,
                    type="blocking" if gate.block_on_failure else "non-blocking",
                )
                failure.text = "\n".join(gate.issues) or gate.message
            elif gate.warning:
                out = ET.SubElement(case, "system-out")
                out.text = gate.message

        props = ET.SubElement(suite, "properties")
        ET.SubElement(props, "property", name="passed", value=str(report.passed).lower())
        ET.SubElement(props, "property", name="message", value=report.message)

        ET.indent(suites)
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + ET.tostring(suites, encoding="unicode")
