"""The depsonar engine: public operations over an injected runner.

``DepsonarEngine`` binds together the three capabilities the core needs:

- a ``CommandRunner`` for every external tool invocation;
- an ``EcosystemRegistry`` describing the supported ecosystems;
- a ``DepsonarConfig`` supplying the projects directory and the
  ignored-package list.

Everything here is blocking and single-threaded. Failures of external tools
are absorbed per project: ``get_outdated`` returns an empty mapping and
``get_security_issues`` returns zero. Use ``resolve_outdated`` to tell
"confirmed up to date" apart from "could not determine".

Usage::

    engine = DepsonarEngine()
    for info in engine.discover_projects():
        report = engine.compute_health_report(info)
        print(info.name, report.score)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from depsonar.cache import utc_now_iso
from depsonar.config import DepsonarConfig, load_config
from depsonar.core.health import (
    build_recommendations,
    compute_quick_score,
    compute_score,
    count_major_updates,
    has_lockfile,
    parse_audit_count,
)
from depsonar.core.models import (
    AuditResult,
    CacheEntry,
    HealthReport,
    OutdatedPackage,
    OutdatedResult,
    ProjectInfo,
    UpdateLevel,
)
from depsonar.core.runner import CommandRunner, ShellRunner
from depsonar.core.updates import (
    build_clean_command,
    build_install_command,
    build_update_command,
)
from depsonar.discovery.classifier import ProjectClassifier
from depsonar.discovery.frameworks import get_framework_version
from depsonar.discovery.scanner import ProjectScanner
from depsonar.ecosystems.base import PARSE_ERRORS
from depsonar.ecosystems.registry import EcosystemRegistry, default_registry
from depsonar.exceptions import CommandError, ProjectNotFoundError

logger = logging.getLogger(__name__)


class DepsonarEngine:
    """Facade over classification, resolution, scoring, and commands.

    Args:
        runner: Command execution capability. Defaults to ``ShellRunner``.
        registry: Ecosystem registry. Defaults to the nine built-ins.
        config: User configuration. Loaded from disk on first use when
            omitted.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        registry: EcosystemRegistry | None = None,
        config: DepsonarConfig | None = None,
    ) -> None:
        self.runner = runner if runner is not None else ShellRunner()
        self.registry = registry if registry is not None else default_registry()
        self._config = config
        self.classifier = ProjectClassifier(self.registry)
        self.scanner = ProjectScanner(self.classifier)

    @property
    def config(self) -> DepsonarConfig:
        if self._config is None:
            self._config = load_config()
        return self._config

    # -- Discovery ----------------------------------------------------------

    def classify(self, path: Path | str) -> ProjectInfo | None:
        """Classify one directory (None if it is not a project)."""
        return self.classifier.classify(path)

    def discover_projects(self, root: Path | str | None = None) -> list[ProjectInfo]:
        """Discover projects under ``root`` or the configured directory."""
        return self.scanner.discover(root if root is not None else self.config.projects_dir)

    def resolve_project(self, project: str) -> ProjectInfo:
        """Resolve a path or a name under the projects directory.

        Args:
            project: A directory path, or a child name of the projects dir.

        Returns:
            The classified project.

        Raises:
            ProjectNotFoundError: If neither interpretation is a project.
        """
        candidate = Path(project).expanduser()
        if candidate.is_dir():
            info = self.classify(candidate)
            if info is not None:
                return info

        named = self.config.projects_dir / project
        if named.is_dir():
            info = self.classify(named)
            if info is not None:
                return info

        for info in self.discover_projects():
            if info.name == project:
                return info

        raise ProjectNotFoundError(
            f'Project "{project}" not found. Run `depsonar scan` to list projects.'
        )

    # -- Outdated -----------------------------------------------------------

    def resolve_outdated(self, path: Path | str, info: ProjectInfo) -> OutdatedResult:
        """Look up outdated packages, keeping the reason for empty results.

        Packages listed in ``ignoredPackages`` are dropped when the engine
        was given an explicit config.
        """
        ecosystem = self.registry.get(info.language)
        if ecosystem is None:
            return OutdatedResult.failed(f"unsupported ecosystem: {info.language}")
        result = ecosystem.resolve_outdated(Path(path), info, self.runner)
        ignored = set(self.config.ignored_packages) if self._config is not None else set()
        if ignored:
            result.packages = {
                name: pkg for name, pkg in result.packages.items() if name not in ignored
            }
        return result

    def get_outdated(self, path: Path | str, info: ProjectInfo) -> dict[str, OutdatedPackage]:
        """Look up outdated packages. Empty on any failure."""
        return self.resolve_outdated(path, info).packages

    # -- Security -----------------------------------------------------------

    def get_security_issues(self, path: Path | str, info: ProjectInfo) -> int:
        """Count vulnerabilities reported by the ecosystem's audit tool.

        Returns:
            The count, or 0 if there is no audit tool, it is not installed,
            it fails, or its output is not understood.
        """
        return self.audit(path, info).vulnerabilities

    def audit(self, path: Path | str, info: ProjectInfo) -> AuditResult:
        """Run the ecosystem's audit tool, keeping the reason for a zero count."""
        ecosystem = self.registry.get(info.language)
        command = ecosystem.audit_command(info) if ecosystem is not None else None
        result = AuditResult(project=info.name, language=info.language, command=command)
        if not command:
            result.error = "no audit tool for this ecosystem"
            return result
        binary = command.split()[0]
        if not self.runner.exists(binary):
            result.error = f"{binary} is not installed"
            return result
        try:
            result.vulnerabilities = parse_audit_count(self.runner.run(command, Path(path)))
        except CommandError as exc:
            logger.warning("%s: audit failed: %s", info.name, exc)
            result.error = str(exc).splitlines()[0]
        except PARSE_ERRORS:
            logger.debug("%s: unrecognized audit output", info.name, exc_info=True)
            result.error = "unrecognized audit output"
        return result

    # -- Health -------------------------------------------------------------

    def compute_health_report(self, info: ProjectInfo) -> HealthReport:
        """Score a project and generate recommendations."""
        outdated = self.get_outdated(info.path, info)
        outdated_count = len(outdated)
        major = count_major_updates(outdated)
        lockfile = has_lockfile(info.path)
        security = self.get_security_issues(info.path, info)
        score = compute_score(outdated_count, major, lockfile, security)
        return HealthReport(
            project=info.name,
            language=info.language,
            framework=info.framework,
            framework_version=get_framework_version(info),
            runtime_version=info.runtime_version,
            package_manager=info.package_manager,
            lockfile_exists=lockfile,
            outdated_count=outdated_count,
            major_updates=major,
            security_issues=security,
            score=score,
            recommendations=build_recommendations(
                score, outdated_count, major, lockfile, security,
            ),
        )

    def summarize(self, info: ProjectInfo) -> CacheEntry:
        """Build a cache entry with the quick score (no audit, no lockfile).

        The background checker skips the audit for speed, so
        ``security_issues`` is always 0 here.
        """
        outdated = self.get_outdated(info.path, info)
        major = count_major_updates(outdated)
        return CacheEntry(
            project=info.name,
            path=info.path,
            language=info.language,
            framework=info.framework,
            outdated_count=len(outdated),
            major_count=major,
            security_issues=0,
            score=compute_quick_score(len(outdated), major),
            checked_at=utc_now_iso(),
        )

    def get_framework_version(self, info: ProjectInfo) -> str | None:
        return get_framework_version(info)

    # -- Commands -----------------------------------------------------------

    def build_update_command(
        self,
        info: ProjectInfo,
        packages: str | Iterable[str] | None = None,
        level: UpdateLevel | str = UpdateLevel.MINOR,
    ) -> str:
        return build_update_command(info, packages, level, registry=self.registry)

    def build_install_command(self, info: ProjectInfo) -> str:
        return build_install_command(info, registry=self.registry)

    def build_clean_command(self, info: ProjectInfo) -> str:
        return build_clean_command(info, registry=self.registry)

    def run(self, command: str, info: ProjectInfo) -> str:
        """Run a command in the project directory.

        Raises:
            CommandError: If the command fails without output.
        """
        logger.info("%s: $ %s", info.name, command)
        return self.runner.run(command, Path(info.path))
