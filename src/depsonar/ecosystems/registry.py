"""Ecosystem registry and detection order.

The ``EcosystemRegistry`` holds ``Ecosystem`` instances in priority order.
Detection walks that order and the first ecosystem with any marker file
present wins; a directory is never classified as two ecosystems at once.
A monorepo root holding both ``package.json`` and ``Cargo.toml`` is
therefore a Node project.

``default_registry()`` builds the nine built-in ecosystems in their fixed
order::

    node, python, rust, go, php, ruby, dart, swift, kotlin

Custom ecosystems can be added via ``register()``; they are tried after the
built-ins.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from depsonar.ecosystems.base import Ecosystem
from depsonar.ecosystems.dart import DartEcosystem
from depsonar.ecosystems.go import GoEcosystem
from depsonar.ecosystems.kotlin import KotlinEcosystem
from depsonar.ecosystems.node import NodeEcosystem
from depsonar.ecosystems.php import PhpEcosystem
from depsonar.ecosystems.python import PythonEcosystem
from depsonar.ecosystems.ruby import RubyEcosystem
from depsonar.ecosystems.rust import RustEcosystem
from depsonar.ecosystems.swift import SwiftEcosystem


class EcosystemRegistry:
    """Ordered registry of ecosystems.

    Attributes:
        ecosystems: Registered instances, in detection priority order.
    """

    def __init__(self) -> None:
        self.ecosystems: list[Ecosystem] = []

    def register(self, ecosystem: Ecosystem) -> None:
        """Append an ecosystem at the lowest priority.

        Raises:
            ValueError: If an ecosystem with the same key is registered.
        """
        if any(e.key == ecosystem.key for e in self.ecosystems):
            raise ValueError(f"Ecosystem already registered: {ecosystem.key}")
        self.ecosystems.append(ecosystem)

    def __iter__(self) -> Iterator[Ecosystem]:
        return iter(self.ecosystems)

    def __len__(self) -> int:
        return len(self.ecosystems)

    def keys(self) -> list[str]:
        return [e.key for e in self.ecosystems]

    def get(self, key: str) -> Ecosystem | None:
        """Look up an ecosystem by key."""
        for ecosystem in self.ecosystems:
            if ecosystem.key == key:
                return ecosystem
        return None

    def detect(self, path: Path) -> Ecosystem | None:
        """Return the highest-priority ecosystem whose markers are present.

        Args:
            path: Directory to probe.

        Returns:
            The matching ecosystem, or None if ``path`` is not a project.
        """
        for ecosystem in self.ecosystems:
            if ecosystem.matches(path):
                return ecosystem
        return None


def default_registry() -> EcosystemRegistry:
    """Create a registry with the nine built-in ecosystems."""
    registry = EcosystemRegistry()
    registry.register(NodeEcosystem())
    registry.register(PythonEcosystem())
    registry.register(RustEcosystem())
    registry.register(GoEcosystem())
    registry.register(PhpEcosystem())
    registry.register(RubyEcosystem())
    registry.register(DartEcosystem())
    registry.register(SwiftEcosystem())
    registry.register(KotlinEcosystem())
    return registry
