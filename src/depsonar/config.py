"""User configuration: projects directory and per-package/project lists.

The configuration file is a JSON document. Candidates, first readable wins:

1. ``~/.depsonarrc.json``
2. ``~/.config/depsonar/config.json``

Recognized keys::

    {
      "projectsDir": "~/Code",
      "ignoredPackages": ["typescript"],
      "autoUpdate": ["my-blog"]
    }

The projects directory resolves in order: the config file's
``projectsDir`` (if it exists on disk), the ``DEPSONAR_PROJECTS_DIR``
environment variable (``DEPUP_PROJECTS_DIR`` is still honored), the first
existing directory among the conventional locations, and finally
``~/Projects``.

A malformed config file is skipped, never fatal.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from depsonar.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".depsonarrc.json"
ENV_PROJECTS_DIR = "DEPSONAR_PROJECTS_DIR"
LEGACY_ENV_PROJECTS_DIR = "DEPUP_PROJECTS_DIR"

# Relative to the home directory, tried in order.
DEFAULT_PROJECTS_DIRS: tuple[str, ...] = (
    "Cursor/App",
    "Projects",
    "Developer",
    "Code",
    "dev",
)


@dataclass
class DepsonarConfig:
    """Resolved configuration.

    Attributes:
        projects_dir: Root directory whose children are scanned.
        ignored_packages: Package names hidden from outdated results.
        auto_update: Project names the background checker updates.
        config_path: The file the values came from, if any.
    """

    projects_dir: Path
    ignored_packages: list[str] = field(default_factory=list)
    auto_update: list[str] = field(default_factory=list)
    config_path: Path | None = None


def config_paths(home: Path | None = None) -> list[Path]:
    """Return the candidate config file locations, in priority order."""
    home_dir = home if home is not None else Path.home()
    return [
        home_dir / CONFIG_FILENAME,
        home_dir / ".config" / "depsonar" / "config.json",
    ]


def _read_config_file(home: Path | None) -> tuple[dict[str, Any], Path | None]:
    for path in config_paths(home):
        if not path.is_file():
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable config file %s", path, exc_info=True)
            continue
        if isinstance(data, dict):
            return data, path
    return {}, None


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def get_projects_dir(
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
    raw: dict[str, Any] | None = None,
) -> Path:
    """Resolve the projects directory.

    Args:
        home: Override the home directory (for testing).
        environ: Override the environment (for testing).
        raw: Already-loaded config data; read from disk when None.

    Returns:
        The directory to scan. May not exist when nothing matched.
    """
    home_dir = home if home is not None else Path.home()
    env = environ if environ is not None else os.environ
    if raw is None:
        raw, _ = _read_config_file(home_dir)

    configured = raw.get("projectsDir")
    if isinstance(configured, str) and configured:
        candidate = Path(configured).expanduser()
        if candidate.is_dir():
            return candidate.resolve()

    for var in (ENV_PROJECTS_DIR, LEGACY_ENV_PROJECTS_DIR):
        value = env.get(var)
        if value and Path(value).expanduser().is_dir():
            return Path(value).expanduser().resolve()

    for rel in DEFAULT_PROJECTS_DIRS:
        candidate = home_dir / rel
        if candidate.is_dir():
            return candidate

    return home_dir / "Projects"


def load_config(
    home: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DepsonarConfig:
    """Load the user configuration.

    Args:
        home: Override the home directory (for testing).
        environ: Override the environment (for testing).

    Returns:
        A ``DepsonarConfig`` with defaults for anything unset.
    """
    raw, path = _read_config_file(home)
    return DepsonarConfig(
        projects_dir=get_projects_dir(home=home, environ=environ, raw=raw),
        ignored_packages=_string_list(raw.get("ignoredPackages")),
        auto_update=_string_list(raw.get("autoUpdate")),
        config_path=path,
    )


def save_config(updates: dict[str, Any], home: Path | None = None) -> Path:
    """Merge ``updates`` into ``~/.depsonarrc.json``.

    Existing keys not named in ``updates`` are preserved.

    Args:
        updates: Keys to set (camelCase, as stored on disk).
        home: Override the home directory (for testing).

    Returns:
        The path written.

    Raises:
        ConfigError: If the file cannot be written.
    """
    path = config_paths(home)[0]
    existing: dict[str, Any] = {}
    if path.is_file():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(loaded, dict):
                existing = loaded
        except (OSError, ValueError):
            logger.warning("Overwriting unreadable config file %s", path)
    merged = {**existing, **updates}
    try:
        path.write_text(json.dumps(merged, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot write {path}: {exc}") from exc
    return path
