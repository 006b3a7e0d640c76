"""Update, install, and clean command construction.

These builders are pure: they return the shell command string and never
execute it. The asymmetry between ecosystems lives in each ``Ecosystem``'s
``update_command``:

- single-command ecosystems pick their minor or latest template;
- Node branches on package manager, and the npm path composes a
  range-bumping helper with a plain install;
- Python upgrades the named packages or everything in requirements.txt.

The ``patch`` level behaves like ``minor`` everywhere except the npm path,
where the helper is constrained with ``--target patch``.
"""

from __future__ import annotations

from collections.abc import Iterable

from depsonar.core.models import ProjectInfo, UpdateLevel
from depsonar.ecosystems.registry import EcosystemRegistry, default_registry


def parse_level(level: UpdateLevel | str) -> UpdateLevel:
    """Coerce a level name into an ``UpdateLevel``.

    Raises:
        ValueError: If the name is not patch, minor, or latest.
    """
    if isinstance(level, UpdateLevel):
        return level
    return UpdateLevel(level.strip().lower())


def normalize_packages(packages: str | Iterable[str] | None) -> list[str]:
    """Turn a space-separated string or an iterable into package names."""
    if packages is None:
        return []
    if isinstance(packages, str):
        return packages.split()
    return [p.strip() for p in packages if p and p.strip()]


def build_update_command(
    info: ProjectInfo,
    packages: str | Iterable[str] | None = None,
    level: UpdateLevel | str = UpdateLevel.MINOR,
    registry: EcosystemRegistry | None = None,
) -> str:
    """Build the update command for a project.

    Args:
        info: Classified project.
        packages: Optional subset of package names to update.
        level: Safety level (patch, minor, latest).
        registry: Ecosystem registry. Defaults to the built-ins.

    Returns:
        The exact shell command to run in the project directory.
    """
    registry = registry if registry is not None else default_registry()
    ecosystem = registry.get(info.language)
    if ecosystem is None:
        return f"{info.package_manager} update"
    return ecosystem.update_command(info, normalize_packages(packages), parse_level(level))


def build_install_command(
    info: ProjectInfo, registry: EcosystemRegistry | None = None,
) -> str:
    """Build the fresh-install command for a project."""
    registry = registry if registry is not None else default_registry()
    ecosystem = registry.get(info.language)
    if ecosystem is None:
        return "npm install"
    return ecosystem.install_command(info)


def build_clean_command(
    info: ProjectInfo, registry: EcosystemRegistry | None = None,
) -> str:
    """Build the command removing installed dependencies ("" if none)."""
    registry = registry if registry is not None else default_registry()
    ecosystem = registry.get(info.language)
    return ecosystem.clean_command(info) if ecosystem is not None else ""
