"""Language ecosystems: detection, outdated parsing, and commands.

Public API::

    from depsonar.ecosystems import default_registry

    registry = default_registry()
    ecosystem = registry.detect(Path("~/Projects/api").expanduser())
"""

from __future__ import annotations

from depsonar.ecosystems.base import Ecosystem
from depsonar.ecosystems.registry import EcosystemRegistry, default_registry

__all__ = [
    "Ecosystem",
    "EcosystemRegistry",
    "default_registry",
]
