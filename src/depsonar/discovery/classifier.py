"""Classify a directory as a project of one ecosystem.

Classification is driven by marker files only. Reading the manifest is
enrichment: a missing, unreadable, or malformed manifest still yields a
valid ``ProjectInfo`` built from defaults (directory basename, no declared
dependencies).

Steps:
    1. Ecosystem: first registry entry with a marker file present.
    2. Package manager: Node only, by lockfile (bun > pnpm > yarn > npm).
    3. Manifest: display name and declared dependencies.
    4. Framework: config files, then Node dependency sniffing.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depsonar.core.models import ProjectInfo
from depsonar.discovery.frameworks import detect_framework
from depsonar.ecosystems.registry import EcosystemRegistry, default_registry

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_MANAGER = "npm"

# (lockfile names, package manager), highest priority first.
NODE_LOCKFILES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("bun.lockb", "bun.lock"), "bun"),
    (("pnpm-lock.yaml",), "pnpm"),
    (("yarn.lock",), "yarn"),
)


def detect_package_manager(path: Path) -> str:
    """Return the Node package manager implied by the lockfiles in ``path``."""
    for lockfiles, manager in NODE_LOCKFILES:
        if any((path / name).exists() for name in lockfiles):
            return manager
    return DEFAULT_PACKAGE_MANAGER


class ProjectClassifier:
    """Turns directories into ``ProjectInfo`` records.

    Args:
        registry: Ecosystems to detect, in priority order. Defaults to the
            nine built-ins.
    """

    def __init__(self, registry: EcosystemRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def classify(self, path: Path | str) -> ProjectInfo | None:
        """Classify one directory.

        Args:
            path: Directory to inspect.

        Returns:
            A ``ProjectInfo``, or None if no ecosystem's marker is present.
        """
        directory = Path(path).resolve()
        ecosystem = self.registry.detect(directory)
        if ecosystem is None:
            return None

        manifest = ecosystem.read_manifest(directory)
        package_manager = (
            detect_package_manager(directory)
            if ecosystem.key == "node"
            else DEFAULT_PACKAGE_MANAGER
        )
        merged = {**manifest.dependencies, **manifest.dev_dependencies}
        framework = detect_framework(
            directory, ecosystem.key, merged, fallback=ecosystem.name,
        )
        return ProjectInfo(
            name=manifest.name or directory.name,
            path=str(directory),
            language=ecosystem.key,
            framework=framework,
            package_manager=package_manager,
            runtime_version=manifest.runtime_version,
            dependencies=dict(manifest.dependencies),
            dev_dependencies=dict(manifest.dev_dependencies),
        )
