"""PHP ecosystem: Composer projects."""

from __future__ import annotations

import json
from pathlib import Path

from depsonar.core.models import ManifestData, OutdatedPackage, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem, load_json_file, string_map


def parse_composer_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``composer outdated --format=json --direct`` output.

    A package is outdated only if its installed version differs from latest.
    """
    parsed = json.loads(raw)
    result: dict[str, OutdatedPackage] = {}
    for item in parsed.get("installed") or []:
        if item.get("version") != item.get("latest"):
            result[item["name"]] = OutdatedPackage(
                current=str(item.get("version")),
                wanted=str(item.get("latest")),
                latest=str(item.get("latest")),
            )
    return result


class PhpEcosystem(Ecosystem):
    """PHP projects identified by ``composer.json``."""

    key = "php"
    name = "PHP"
    marker_files = ("composer.json",)
    lockfiles = ("composer.lock",)
    outdated_cmd = "composer outdated --format=json --direct"
    update_cmd = "composer update"
    update_latest_cmd = "composer update --with-all-dependencies"
    install_cmd = "composer install"
    clean_cmd = "rm -rf vendor"
    audit_cmd = "composer audit --format=json"

    def read_manifest(self, path: Path) -> ManifestData:
        composer = load_json_file(path / "composer.json")
        if not isinstance(composer, dict):
            return ManifestData()
        name = composer.get("name")
        return ManifestData(
            name=name if isinstance(name, str) and name else None,
            dependencies=string_map(composer.get("require")),
            dev_dependencies=string_map(composer.get("require-dev")),
        )

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        return None if runner.exists("composer") else "composer"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_composer_outdated(raw)
