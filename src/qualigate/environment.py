"""Project discovery for Qualigate.

This module discovers facts about the target project: its name, version and
kind. Discovery reads manifest files only (package.json, pyproject.toml,
setup.cfg, setup.py) and is computed once per run.

Example:
    >>> meta = discover_project(Path("/path/to/app"))
    >>> meta.project_type
    <ProjectType.REACT_WEBAPP: 'react-webapp'>
    >>> meta.version
    '1.4.2'
"""

from __future__ import annotations

import configparser
import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from .config import load_toml_file
from .exceptions import InvalidPathError
from .logging_config import get_logger
from .models import ProjectMetadata, ProjectType

logger = get_logger(__name__)

_CLI_DEPENDENCIES = {"commander", "yargs", "meow", "oclif", "click", "typer", "argparse", "docopt"}
_NODE_SERVER_DEPENDENCIES = {"express", "fastify", "koa", "@nestjs/core", "hapi", "@hapi/hapi"}


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with second precision."""
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def discover_project(
    root: Path | str,
    project_type: Optional[ProjectType] = None,
    analyzed_at: Optional[str] = None,
) -> ProjectMetadata:
    """Discover metadata about the project at ``root``.

    Args:
        root: Path to the project root directory
        project_type: Skip detection and use this type
        analyzed_at: Timestamp to record (default: now, UTC)

    Returns:
        Immutable ProjectMetadata instance

    Raises:
        InvalidPathError: If root does not exist or is not a directory
    """
    root_path = Path(root).resolve()

    if not root_path.exists():
        raise InvalidPathError(root_path, "directory not found")
    if not root_path.is_dir():
        raise InvalidPathError(root_path, "not a directory")

    package_json = read_package_json(root_path)
    pyproject = read_pyproject(root_path)

    name, version = _detect_name_and_version(root_path, package_json, pyproject)
    detected = project_type or detect_project_type(root_path, package_json, pyproject)

    logger.debug(f"Project discovered: {name} {version} ({detected.value}) at {root_path}")

    return ProjectMetadata(
        project_root=str(root_path),
        project_type=detected,
        project_name=name,
        version=version,
        analyzed_at=analyzed_at or utc_timestamp(),
    )


def detect_project_type(
    root: Path,
    package_json: Optional[dict[str, Any]] = None,
    pyproject: Optional[dict[str, Any]] = None,
) -> ProjectType:
    """Classify the project from its manifests.

    JavaScript manifests are checked first: React, then Vue, then server
    frameworks, then CLI ``bin`` entries, then TypeScript. Python projects
    are packages when they declare build metadata, apps otherwise.
    """
    if package_json is not None:
        deps = _all_dependencies(package_json)
        if deps & {"react", "react-dom", "next", "@types/react"}:
            return ProjectType.REACT_WEBAPP
        if deps & {"vue", "nuxt", "@vue/cli-service"}:
            return ProjectType.VUE_WEBAPP
        if deps & _NODE_SERVER_DEPENDENCIES:
            return ProjectType.NODE_API
        if package_json.get("bin") or deps & _CLI_DEPENDENCIES:
            return ProjectType.CLI_TOOL
        if (root / "tsconfig.json").exists() or "typescript" in deps:
            return ProjectType.TYPESCRIPT
        return ProjectType.JAVASCRIPT

    if pyproject is not None or (root / "setup.py").exists() or (root / "setup.cfg").exists():
        scripts = (pyproject or {}).get("project", {}).get("scripts") or (pyproject or {}).get(
            "tool", {}
        ).get("poetry", {}).get("scripts")
        if scripts:
            return ProjectType.CLI_TOOL
        return ProjectType.PYTHON_PACKAGE

    if (root / "requirements.txt").exists() or any(root.glob("*.py")):
        return ProjectType.PYTHON_APP

    if (root / "tsconfig.json").exists():
        return ProjectType.TYPESCRIPT

    return ProjectType.UNKNOWN


def read_package_json(root: Path) -> Optional[dict[str, Any]]:
    path = root / "package.json"
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Cannot parse {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


def read_pyproject(root: Path) -> Optional[dict[str, Any]]:
    path = root / "pyproject.toml"
    if not path.is_file():
        return None
    try:
        return load_toml_file(path)
    except Exception as e:
        logger.warning(f"Cannot parse {path}: {e}")
        return None


def _all_dependencies(package_json: dict[str, Any]) -> set[str]:
    deps: set[str] = set()
    for key in ("dependencies", "devDependencies", "peerDependencies"):
        section = package_json.get(key)
        if isinstance(section, dict):
            deps.update(section)
    return deps


def _detect_name_and_version(
    root: Path,
    package_json: Optional[dict[str, Any]],
    pyproject: Optional[dict[str, Any]],
) -> tuple[str, str]:
    """Name and version from the first manifest that declares them."""
    if package_json:
        name = package_json.get("name")
        version = package_json.get("version")
        if name:
            return str(name), str(version or "0.0.0")

    if pyproject:
        project = pyproject.get("project") or pyproject.get("tool", {}).get("poetry") or {}
        if project.get("name"):
            return str(project["name"]), str(project.get("version") or "0.0.0")

    setup_cfg = root / "setup.cfg"
    if setup_cfg.is_file():
        parser = configparser.ConfigParser()
        try:
            parser.read(setup_cfg, encoding="utf-8")
        except configparser.Error as e:
            logger.warning(f"Cannot parse {setup_cfg}: {e}")
        else:
            if parser.has_option("metadata", "name"):
                return (
                    parser.get("metadata", "name"),
                    parser.get("metadata", "version", fallback="0.0.0"),
                )

    setup_py = root / "setup.py"
    if setup_py.is_file():
        try:
            text = setup_py.read_text(encoding="utf-8", errors="replace")
        except OSError:
            text = ""
        name_match = re.search(r"name\s*=\s*['\"]([^'\"]+)['\"]", text)
        version_match = re.search(r"version\s*=\s*['\"]([^'\"]+)['\"]", text)
        if name_match:
            return name_match.group(1), version_match.group(1) if version_match else "0.0.0"

    return root.name, "0.0.0"
