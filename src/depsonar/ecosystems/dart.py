"""Dart/Flutter ecosystem: pub projects.

``flutter pub outdated --json`` is preferred when the Flutter SDK is
installed, since Flutter projects cannot resolve under a bare Dart SDK.
Each package record carries ``current``, ``upgradable``, ``resolvable`` and
``latest`` sub-objects; ``resolvable`` is the best version reachable
without editing constraints and becomes ``wanted``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from depsonar.core.models import ManifestData, OutdatedPackage, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem, read_text_file, string_map

logger = logging.getLogger(__name__)


def _version(record: object) -> str | None:
    if isinstance(record, dict) and record.get("version"):
        return str(record["version"])
    return None


def parse_pub_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``pub outdated --json`` output."""
    parsed = json.loads(raw)
    result: dict[str, OutdatedPackage] = {}
    for pkg in parsed.get("packages") or []:
        current = _version(pkg.get("current"))
        latest = _version(pkg.get("latest"))
        if current and latest and current != latest:
            result[pkg["package"]] = OutdatedPackage(
                current=current,
                wanted=_version(pkg.get("resolvable")) or latest,
                latest=latest,
            )
    return result


class DartEcosystem(Ecosystem):
    """Dart and Flutter projects identified by ``pubspec.yaml``."""

    key = "dart"
    name = "Dart/Flutter"
    marker_files = ("pubspec.yaml",)
    lockfiles = ("pubspec.lock",)
    outdated_cmd = "dart pub outdated --json"
    update_cmd = "dart pub upgrade"
    update_latest_cmd = "dart pub upgrade --major-versions"
    install_cmd = "dart pub get"
    clean_cmd = "rm -rf .dart_tool"

    def read_manifest(self, path: Path) -> ManifestData:
        text = read_text_file(path / "pubspec.yaml")
        if text is None:
            return ManifestData()
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            logger.debug("Malformed pubspec.yaml in %s", path)
            return ManifestData()
        if not isinstance(data, dict):
            return ManifestData()
        name = data.get("name")
        return ManifestData(
            name=name if isinstance(name, str) and name else None,
            dependencies=string_map(data.get("dependencies")),
            dev_dependencies=string_map(data.get("dev_dependencies")),
        )

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        if runner.exists("flutter") or runner.exists("dart"):
            return None
        return "dart"

    def outdated_command(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str:
        if runner.exists("flutter"):
            return "flutter pub outdated --json"
        return "dart pub outdated --json"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_pub_outdated(raw)
