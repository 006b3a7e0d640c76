"""Python ecosystem: pip-managed projects.

Identified by ``requirements.txt``, ``pyproject.toml``, ``Pipfile`` or
``setup.py``. Outdated packages come from ``pip list --outdated
--format=json``, preferring a ``pip3`` binary when present. pip reports a
flat installed/latest pair, so ``wanted`` is always ``latest``.

Note that pip inspects whatever environment the binary belongs to, not the
project's virtualenv unless that is the active one.
"""

from __future__ import annotations

import json
import logging
import re
import tomllib
from pathlib import Path

from depsonar.core.models import (
    ManifestData,
    OutdatedPackage,
    ProjectInfo,
    UpdateLevel,
)
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem, read_text_file

logger = logging.getLogger(__name__)

_REQUIREMENT_NAME = re.compile(r"^([a-zA-Z0-9_-]+)")


def parse_pip_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``pip list --outdated --format=json`` output.

    Raises:
        ValueError: If the output is not a JSON array.
    """
    parsed = json.loads(raw)
    if not isinstance(parsed, list):
        raise ValueError("expected a JSON array")
    result: dict[str, OutdatedPackage] = {}
    for item in parsed:
        if not isinstance(item, dict) or "name" not in item:
            continue
        latest = str(item.get("latest_version", "?"))
        result[item["name"]] = OutdatedPackage(
            current=str(item.get("version", "?")),
            wanted=latest,
            latest=latest,
        )
    return result


def parse_requirements(text: str) -> dict[str, str]:
    """Extract package names from a requirements file.

    Comment and option lines (``-r``, ``-e``) are skipped. Every name maps
    to "*" since the declared specifier is not needed downstream.
    """
    deps: dict[str, str] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith(("#", "-")):
            continue
        match = _REQUIREMENT_NAME.match(stripped)
        if match:
            deps[match.group(1)] = "*"
    return deps


class PythonEcosystem(Ecosystem):
    """Python projects using pip."""

    key = "python"
    name = "Python"
    marker_files = ("requirements.txt", "pyproject.toml", "Pipfile", "setup.py")
    lockfiles = ("Pipfile.lock",)
    outdated_cmd = "pip list --outdated --format=json"
    update_cmd = "pip install --upgrade {packages}"
    update_latest_cmd = "pip install --upgrade {packages}"
    install_cmd = "pip install -r requirements.txt"
    audit_cmd = "pip-audit --format=json"

    def read_manifest(self, path: Path) -> ManifestData:
        deps: dict[str, str] = {}
        text = read_text_file(path / "requirements.txt")
        if text is not None:
            deps = parse_requirements(text)

        name = None
        pyproject = read_text_file(path / "pyproject.toml")
        if pyproject is not None:
            try:
                project = tomllib.loads(pyproject).get("project", {})
                if isinstance(project, dict) and isinstance(project.get("name"), str):
                    name = project["name"]
            except tomllib.TOMLDecodeError:
                logger.debug("Malformed pyproject.toml in %s", path)
        return ManifestData(name=name, dependencies=deps)

    def _pip(self, runner: CommandRunner) -> str | None:
        if runner.exists("pip3"):
            return "pip3"
        if runner.exists("pip"):
            return "pip"
        return None

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        return None if self._pip(runner) else "pip"

    def outdated_command(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str:
        return f"{self._pip(runner)} list --outdated --format=json"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_pip_outdated(raw)

    def update_command(
        self, info: ProjectInfo, packages: list[str], level: UpdateLevel,
    ) -> str:
        if packages:
            return f"pip install --upgrade {' '.join(packages)}"
        return "pip install --upgrade -r requirements.txt"
