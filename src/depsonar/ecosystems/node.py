"""Node.js ecosystem: npm, pnpm, yarn, and bun projects.

Detection is by ``package.json``. The package manager is chosen by lockfile
(see ``depsonar.discovery.classifier``) and flows through every command.

Outdated output comes in two shapes depending on the package manager:

- an **object** keyed by package name (npm, pnpm)::

      {"svelte": {"current": "4.1.0", "wanted": "4.2.0", "latest": "5.0.0",
                  "type": "devDependencies"}}

- an **array** of records carrying the name inline (bun and some pnpm
  versions)::

      [{"name": "svelte", "current": "4.1.0", "latest": "5.0.0",
        "dependencyType": "devDependencies"}]

Missing ``current``/``latest`` default to "?", missing ``wanted`` to
``current``.

Update commands branch on the package manager. ``npm update`` only moves
within the ranges already declared in ``package.json``, so it can neither
bump a major nor widen a range. The npm path therefore runs
``npm-check-updates`` to rewrite the ranges first, then a plain install,
chained with ``&&`` so the install only runs if the rewrite succeeded.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from depsonar.core.models import (
    ManifestData,
    OutdatedPackage,
    ProjectInfo,
    UpdateLevel,
)
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem, load_json_file, string_map

# Range-bumping helper used on the npm path.
NCU_COMMAND = "npx -y npm-check-updates -u"


def _entry(item: dict[str, Any]) -> OutdatedPackage:
    current = item.get("current") or "?"
    return OutdatedPackage(
        current=current,
        wanted=item.get("wanted") or item.get("current") or "?",
        latest=item.get("latest") or "?",
        type=item.get("dependencyType") or item.get("type"),
    )


def parse_npm_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``<pm> outdated --json`` output in either shape.

    Args:
        raw: JSON text.

    Returns:
        Package name to ``OutdatedPackage``.

    Raises:
        ValueError: If the output is not JSON or neither shape.
    """
    parsed = json.loads(raw)
    result: dict[str, OutdatedPackage] = {}
    if isinstance(parsed, list):
        for item in parsed:
            if not isinstance(item, dict):
                continue
            name = item.get("name") or item.get("package")
            if name:
                result[name] = _entry(item)
        return result
    if isinstance(parsed, dict):
        for name, item in parsed.items():
            if isinstance(item, dict):
                result[name] = _entry(item)
        return result
    raise ValueError(f"unexpected outdated payload: {type(parsed).__name__}")


class NodeEcosystem(Ecosystem):
    """Node.js projects identified by ``package.json``."""

    key = "node"
    name = "Node.js"
    marker_files = ("package.json",)
    lockfiles = ("pnpm-lock.yaml", "package-lock.json", "yarn.lock", "bun.lockb", "bun.lock")
    outdated_cmd = "{pm} outdated --json"
    update_cmd = "{pm} update"
    update_latest_cmd = "{pm} update --latest"
    install_cmd = "{pm} install"
    clean_cmd = "rm -rf node_modules"
    audit_cmd = "{pm} audit --json"

    def read_manifest(self, path: Path) -> ManifestData:
        pkg = load_json_file(path / "package.json")
        if not isinstance(pkg, dict):
            return ManifestData()
        engines = pkg.get("engines")
        runtime = engines.get("node") if isinstance(engines, dict) else None
        name = pkg.get("name")
        return ManifestData(
            name=name if isinstance(name, str) and name else None,
            dependencies=string_map(pkg.get("dependencies")),
            dev_dependencies=string_map(pkg.get("devDependencies")),
            runtime_version=runtime if isinstance(runtime, str) else None,
        )

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        return None if runner.exists(info.package_manager) else info.package_manager

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_npm_outdated(raw)

    def update_command(
        self, info: ProjectInfo, packages: list[str], level: UpdateLevel,
    ) -> str:
        pm = info.package_manager
        pkg_list = " ".join(packages)
        latest = level is UpdateLevel.LATEST

        if pm in ("pnpm", "yarn"):
            verb = "pnpm update" if pm == "pnpm" else "yarn upgrade"
            parts = [verb]
            if pkg_list:
                parts.append(pkg_list)
            if latest:
                parts.append("--latest")
            return " ".join(parts)

        if pm == "bun":
            return f"bun update {pkg_list}" if pkg_list else "bun update"

        parts = [NCU_COMMAND]
        if not latest:
            parts.append(f"--target {level.value}")
        if pkg_list:
            parts.append(pkg_list)
        return " ".join(parts) + " && npm install"
