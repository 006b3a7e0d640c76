"""Kotlin/Java ecosystem: Gradle projects.

Gradle has no native outdated listing. The ``com.github.ben-manes.versions``
plugin adds a ``dependencyUpdates`` task that writes a JSON report to
``build/dependencyUpdates/report.json``. The resolver runs the task (through
the project's ``gradlew`` wrapper when present) and then reads the report.
If the plugin is not applied, no report appears and the lookup comes back
empty.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from depsonar.core.models import OutdatedPackage, OutdatedResult, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import PARSE_ERRORS, Ecosystem, read_text_file
from depsonar.exceptions import CommandError

logger = logging.getLogger(__name__)

REPORT_PATH = Path("build") / "dependencyUpdates" / "report.json"
_TASK_ARGS = "dependencyUpdates -Drevision=release --output-formatter json"


def parse_gradle_report(raw: str) -> dict[str, OutdatedPackage]:
    """Parse a ``dependencyUpdates`` JSON report."""
    report = json.loads(raw)
    result: dict[str, OutdatedPackage] = {}
    for dep in (report.get("outdated") or {}).get("dependencies") or []:
        name = f"{dep['group']}:{dep['name']}" if dep.get("group") else dep["name"]
        available = dep.get("available") or {}
        current = dep.get("version") or "?"
        newest = available.get("release") or available.get("milestone") or dep.get("version")
        result[name] = OutdatedPackage(current=current, wanted=newest, latest=newest)
    return result


class KotlinEcosystem(Ecosystem):
    """Gradle projects identified by ``build.gradle.kts`` or ``build.gradle``."""

    key = "kotlin"
    name = "Kotlin/Java"
    marker_files = ("build.gradle.kts", "build.gradle")
    lockfiles = ("gradle.lockfile",)
    outdated_cmd = f"./gradlew {_TASK_ARGS}"
    update_cmd = "./gradlew dependencyUpdates"
    update_latest_cmd = "./gradlew dependencyUpdates -Drevision=release"
    install_cmd = "./gradlew build"
    clean_cmd = "./gradlew clean"

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        if (path / "gradlew").exists() or runner.exists("gradle"):
            return None
        return "gradle"

    def outdated_command(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str:
        if (path / "gradlew").exists():
            return f"./gradlew {_TASK_ARGS}"
        return f"gradle {_TASK_ARGS}"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_gradle_report(raw)

    def resolve_outdated(
        self, path: Path, info: ProjectInfo, runner: CommandRunner,
    ) -> OutdatedResult:
        missing = self.missing_tool(path, info, runner)
        if missing is not None:
            return OutdatedResult.absent(missing)
        command = self.outdated_command(path, info, runner)
        try:
            runner.run(command, path)
        except CommandError as exc:
            logger.warning("%s: dependencyUpdates failed: %s", info.name, exc)
            return OutdatedResult.failed(str(exc))

        raw = read_text_file(path / REPORT_PATH)
        if raw is None:
            return OutdatedResult.failed(
                f"{REPORT_PATH} not generated; is the gradle-versions-plugin applied?"
            )
        try:
            return OutdatedResult(packages=self.parse_outdated(raw))
        except PARSE_ERRORS as exc:
            logger.warning("%s: unreadable dependency report: %s", info.name, exc)
            return OutdatedResult.unparseable(f"{REPORT_PATH}: {exc}")
