"""Rust ecosystem: Cargo projects.

``cargo`` has no built-in outdated listing. The ``cargo-outdated`` plugin
provides one; without it the lookup reports the tool as absent rather than
guessing from ``Cargo.lock``.
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path

from depsonar.core.models import ManifestData, OutdatedPackage, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem, read_text_file

logger = logging.getLogger(__name__)


def parse_cargo_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``cargo outdated --format json`` output.

    Only dependencies whose project version differs from latest are kept.
    ``compat`` (the newest semver-compatible release) becomes ``wanted``.
    """
    parsed = json.loads(raw)
    result: dict[str, OutdatedPackage] = {}
    for dep in parsed.get("dependencies") or []:
        if dep.get("project") != dep.get("latest"):
            result[dep["name"]] = OutdatedPackage(
                current=str(dep.get("project")),
                wanted=str(dep.get("compat")),
                latest=str(dep.get("latest")),
                type=dep.get("kind"),
            )
    return result


class RustEcosystem(Ecosystem):
    """Rust projects identified by ``Cargo.toml``."""

    key = "rust"
    name = "Rust"
    marker_files = ("Cargo.toml",)
    lockfiles = ("Cargo.lock",)
    outdated_cmd = "cargo outdated --format json"
    update_cmd = "cargo update"
    update_latest_cmd = "cargo update"
    install_cmd = "cargo build"
    clean_cmd = "cargo clean"
    audit_cmd = "cargo audit --json"

    def read_manifest(self, path: Path) -> ManifestData:
        text = read_text_file(path / "Cargo.toml")
        if text is None:
            return ManifestData()
        try:
            package = tomllib.loads(text).get("package", {})
        except tomllib.TOMLDecodeError:
            logger.debug("Malformed Cargo.toml in %s", path)
            return ManifestData()
        name = package.get("name") if isinstance(package, dict) else None
        return ManifestData(name=name if isinstance(name, str) else None)

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        for tool in ("cargo", "cargo-outdated"):
            if not runner.exists(tool):
                return tool
        return None

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_cargo_outdated(raw)
