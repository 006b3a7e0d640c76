"""Swift ecosystem: Swift Package Manager projects.

SwiftPM has no outdated command. The resolver reads ``Package.resolved``
instead and reports every pin with its pinned version as current, wanted
and latest at once. Determining the true latest tag would take a network
call per dependency repository, which this resolver does not make, so a
Swift project's pins are listed but never flagged as behind.

Two schema shapes exist:

- v1: ``{"object": {"pins": [{"package": ..., "repositoryURL": ...,
  "state": {...}}]}}``
- v2/v3: ``{"pins": [{"identity": ..., "location": ..., "state": {...}}]}``
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from depsonar.core.models import OutdatedPackage, OutdatedResult, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import PARSE_ERRORS, Ecosystem, read_text_file

logger = logging.getLogger(__name__)

RESOLVED_FILE = "Package.resolved"


def _pin_name(pin: dict) -> str | None:
    name = pin.get("identity") or pin.get("package")
    if name:
        return str(name)
    url = pin.get("repositoryURL")
    if isinstance(url, str) and url:
        return url.split("/")[-1].replace(".git", "") or None
    return None


def _pin_version(pin: dict) -> str | None:
    state = pin.get("state")
    if not isinstance(state, dict):
        return None
    if state.get("version"):
        return str(state["version"])
    revision = state.get("revision")
    if isinstance(revision, str) and revision:
        return revision[:8]
    return None


def parse_package_resolved(raw: str) -> dict[str, OutdatedPackage]:
    """Parse a ``Package.resolved`` document in either schema shape."""
    resolved = json.loads(raw)
    pins = resolved.get("pins")
    if pins is None:
        pins = (resolved.get("object") or {}).get("pins") or []
    result: dict[str, OutdatedPackage] = {}
    for pin in pins:
        if not isinstance(pin, dict):
            continue
        name = _pin_name(pin)
        version = _pin_version(pin)
        if name and version:
            result[name] = OutdatedPackage(current=version, wanted=version, latest=version)
    return result


class SwiftEcosystem(Ecosystem):
    """Swift projects identified by ``Package.swift``."""

    key = "swift"
    name = "Swift"
    marker_files = ("Package.swift",)
    lockfiles = ("Package.resolved",)
    outdated_cmd = "swift package show-dependencies --format json"
    update_cmd = "swift package update"
    update_latest_cmd = "swift package update"
    install_cmd = "swift package resolve"
    clean_cmd = "swift package clean"

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        return None if runner.exists("swift") else "swift"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_package_resolved(raw)

    def resolve_outdated(
        self, path: Path, info: ProjectInfo, runner: CommandRunner,
    ) -> OutdatedResult:
        missing = self.missing_tool(path, info, runner)
        if missing is not None:
            return OutdatedResult.absent(missing)
        raw = read_text_file(path / RESOLVED_FILE)
        if raw is None:
            return OutdatedResult()
        try:
            return OutdatedResult(packages=self.parse_outdated(raw))
        except PARSE_ERRORS as exc:
            logger.warning("%s: unreadable %s: %s", info.name, RESOLVED_FILE, exc)
            return OutdatedResult.unparseable(f"{RESOLVED_FILE}: {exc}")
