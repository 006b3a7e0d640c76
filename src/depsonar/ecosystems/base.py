"""Base interface for language ecosystems.

Every supported ecosystem implements the ``Ecosystem`` abstract base class.
An ecosystem knows:

- which **marker files** identify a project directory as its own;
- how to read its **manifest** for a display name and declared dependencies;
- how to list **outdated** packages with its native tool and normalize the
  output into ``OutdatedPackage`` records;
- which commands **update**, **install**, **clean**, and **audit** a
  project.

Outdated lookups follow one template (``resolve_outdated``):

1. Pre-check that the external tool is installed. A missing tool yields a
   ``TOOL_ABSENT`` result without spawning anything.
2. Run the listing command. ``CommandError`` yields ``TOOL_FAILED``.
3. Empty output is a confirmed "nothing outdated".
4. Parse the output. Any shape error yields ``PARSE_FAILED``.

Subclasses fill in ``missing_tool``, ``outdated_command`` and
``parse_outdated``. Ecosystems whose data does not come from stdout (Swift
reads a pins file, Gradle reads a generated report) override
``resolve_outdated`` directly. Lookups never raise.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from depsonar.core.models import (
    ManifestData,
    OutdatedPackage,
    OutdatedResult,
    ProjectInfo,
    UpdateLevel,
)
from depsonar.core.runner import CommandRunner
from depsonar.exceptions import CommandError

logger = logging.getLogger(__name__)

# Errors a parser may raise on output that is not in the expected shape.
PARSE_ERRORS: tuple[type[Exception], ...] = (
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
)


def load_json_file(path: Path) -> Any:
    """Read and decode a JSON file, returning None on any failure."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None


def read_text_file(path: Path) -> str | None:
    """Read a text file, returning None on any failure."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def string_map(value: Any) -> dict[str, str]:
    """Coerce a manifest dependency table into ``dict[str, str]``.

    Non-mapping values yield an empty dict. Nested specs (e.g. a pubspec
    ``path:`` dependency) are rendered with ``str``.
    """
    if not isinstance(value, dict):
        return {}
    return {str(k): v if isinstance(v, str) else str(v) for k, v in value.items()}


class Ecosystem(ABC):
    """Abstract base class for one language ecosystem.

    Class attributes describe the ecosystem statically. Command templates
    may contain ``{pm}`` (package manager) and ``{packages}`` placeholders.

    Attributes:
        key: Machine identifier (e.g. "node").
        name: Human-readable name (e.g. "Node.js").
        marker_files: Filenames whose presence identifies a project.
        lockfiles: Lockfile names this ecosystem writes.
        outdated_cmd: Listing command template, informational for
            ecosystems that pick their binary at runtime.
        update_cmd: Update command for the minor/patch levels.
        update_latest_cmd: Update command for the latest level.
        install_cmd: Fresh install command.
        clean_cmd: Command removing installed dependencies ("" if none).
        audit_cmd: Machine-readable audit command, or None.
    """

    key: str = ""
    name: str = ""
    marker_files: tuple[str, ...] = ()
    lockfiles: tuple[str, ...] = ()
    outdated_cmd: str = ""
    update_cmd: str = ""
    update_latest_cmd: str = ""
    install_cmd: str = ""
    clean_cmd: str = ""
    audit_cmd: str | None = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r})"

    # -- Detection ----------------------------------------------------------

    def matches(self, path: Path) -> bool:
        """Return True if any marker file exists in ``path``."""
        return any((path / marker).exists() for marker in self.marker_files)

    def read_manifest(self, path: Path) -> ManifestData:
        """Extract name and declared dependencies from the manifest.

        Must not raise. The default reads nothing.
        """
        return ManifestData()

    # -- Outdated -----------------------------------------------------------

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        """Return the name of a required tool that is not installed, if any."""
        return None

    def outdated_command(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str:
        """Return the listing command to run for this project."""
        return self.outdated_cmd.replace("{pm}", info.package_manager)

    @abstractmethod
    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        """Parse listing output into normalized packages.

        May raise any of ``PARSE_ERRORS`` on output of the wrong shape.
        Malformed fragments inside otherwise valid output are skipped.
        """

    def resolve_outdated(
        self, path: Path, info: ProjectInfo, runner: CommandRunner,
    ) -> OutdatedResult:
        """Run the listing command and parse its output.

        Args:
            path: Project directory.
            info: Classified project.
            runner: Command execution capability.

        Returns:
            An ``OutdatedResult``. Never raises.
        """
        missing = self.missing_tool(path, info, runner)
        if missing is not None:
            logger.debug("%s: %s not installed, skipping", info.name, missing)
            return OutdatedResult.absent(missing)

        command = self.outdated_command(path, info, runner)
        try:
            raw = runner.run(command, path)
        except CommandError as exc:
            logger.warning("%s: outdated check failed: %s", info.name, exc)
            return OutdatedResult.failed(str(exc))

        if not raw.strip():
            return OutdatedResult()
        try:
            packages = self.parse_outdated(raw)
        except PARSE_ERRORS as exc:
            logger.warning("%s: could not parse %r output: %s", info.name, command, exc)
            return OutdatedResult.unparseable(f"{command}: {exc}")
        return OutdatedResult(packages=packages)

    # -- Commands -----------------------------------------------------------

    def update_command(
        self, info: ProjectInfo, packages: list[str], level: UpdateLevel,
    ) -> str:
        """Build the update command for a safety level.

        Single-command ecosystems ignore the package subset and pick the
        latest or minor template.
        """
        template = self.update_latest_cmd if level is UpdateLevel.LATEST else self.update_cmd
        return template.replace("{pm}", info.package_manager)

    def install_command(self, info: ProjectInfo) -> str:
        return self.install_cmd.replace("{pm}", info.package_manager)

    def clean_command(self, info: ProjectInfo) -> str:
        return self.clean_cmd

    def audit_command(self, info: ProjectInfo) -> str | None:
        if not self.audit_cmd:
            return None
        return self.audit_cmd.replace("{pm}", info.package_manager)
