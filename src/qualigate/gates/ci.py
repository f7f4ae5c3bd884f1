"""CI emission: format detection, report files, and CI environment hooks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from ..config import GatesConfig
from ..exceptions import QualigateError
from ..logging_config import get_logger
from .formats import GitHubActionsFormat, get_ci_format
from .models import GatesReport

logger = get_logger(__name__)


@dataclass(frozen=True)
class CIOutput:
    format: str
    content: str
    passed: bool
    output_path: Optional[Path] = None


def detect_ci_format(environ: Optional[Mapping[str, str]] = None, fallback: str = "generic") -> str:
    """Pick a format from well-known CI environment variables."""
    env = os.environ if environ is None else environ
    if env.get("GITHUB_ACTIONS") == "true":
        return "github-actions"
    if env.get("GITLAB_CI") == "true":
        return "gitlab-ci"
    if env.get("JENKINS_URL"):
        return "jenkins"
    return fallback


def resolve_format(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    return detect_ci_format(environ) if name == "auto" else name


def generate_ci_output(
    report: GatesReport,
    format_name: str = "auto",
    config: Optional[GatesConfig] = None,
    output_path: Optional[Path] = None,
    environ: Optional[MutableMapping[str, str]] = None,
) -> CIOutput:
    """Render ``report`` for a CI platform and run the platform hooks.

    Hooks: write ``output_path``; on GitHub Actions append the step summary
    to ``$GITHUB_STEP_SUMMARY`` and write ``passed``/``score`` to
    ``$GITHUB_OUTPUT``; export ``<prefix>PASSED`` and friends when
    ``config.set_environment`` is on.

    Raises:
        UnsupportedFormatError: If the format is not recognized
        QualigateError: If the report file cannot be written
    """
    env = os.environ if environ is None else environ
    name = resolve_format(format_name, env)
    formatter = get_ci_format(name)
    content = formatter.format(report, config)

    if output_path is not None:
        write_output(content, output_path)

    if isinstance(formatter, GitHubActionsFormat):
        _github_hooks(formatter, report, env)

    if config is not None and config.set_environment:
        set_environment_variables(report, config.environment_prefix, env)

    return CIOutput(format=name, content=content, passed=report.passed, output_path=output_path)


def write_output(content: str, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content if content.endswith("\n") else content + "\n", encoding="utf-8")
    except OSError as e:
        raise QualigateError(f"Failed to write CI output: {e}", details={"path": str(path)})
    logger.info(f"CI output written to {path}")


def set_environment_variables(
    report: GatesReport,
    prefix: str = "QUALITY_GATES_",
    environ: Optional[MutableMapping[str, str]] = None,
) -> None:
    env = os.environ if environ is None else environ
    env[f"{prefix}PASSED"] = str(report.passed).lower()
    env[f"{prefix}SCORE"] = "" if report.overall_score is None else f"{report.overall_score:g}"
    env[f"{prefix}FAILED_GATES"] = str(report.summary.failed)
    env[f"{prefix}TOTAL_GATES"] = str(report.summary.total)
    logger.debug(f"Set CI environment variables with prefix {prefix}")


def _github_hooks(
    formatter: GitHubActionsFormat, report: GatesReport, env: Mapping[str, str]
) -> None:
    summary_file = env.get("GITHUB_STEP_SUMMARY")
    if summary_file:
        _append(Path(summary_file), formatter.step_summary(report))

    output_file = env.get("GITHUB_OUTPUT")
    if output_file:
        score = "" if report.overall_score is None else f"{report.overall_score:g}"
        _append(Path(output_file), f"passed={str(report.passed).lower()}\nscore={score}\n")


def _append(path: Path, text: str) -> None:
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        logger.warning(f"Cannot append to {path}: {e}")
