"""Background checker: scan every project and persist the summary.

Meant to run from cron or launchd. One run:

1. Discover projects under the configured directory.
2. For each project, resolve outdated packages and build a ``CacheEntry``
   with the quick score (no audit, no lockfile check). A failure is recorded
   for that project and the batch continues.
3. Write the cache.
4. For projects named in ``autoUpdate`` that have outdated packages, run
   the minor-level update command, re-scan them, replace their entries by
   project name, and rewrite the cache.

Only one run may be in flight per process; a second concurrent call raises
``ScanInProgressError``. Between projects the checker calls ``on_progress``
so an embedding event loop can interleave other work.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from depsonar.cache import CacheStore
from depsonar.core.engine import DepsonarEngine
from depsonar.core.models import CacheEntry, ProjectInfo, UpdateLevel
from depsonar.exceptions import CommandError, ScanInProgressError

logger = logging.getLogger(__name__)

_SCAN_LOCK = threading.Lock()


@dataclass
class CheckResult:
    """Outcome of one checker run.

    Attributes:
        entries: Cache entries written, in project order.
        errors: Project name to error message for failed projects.
        updated: Projects the auto-update pass updated successfully.
        elapsed: Wall-clock seconds for the whole run.
    """

    entries: list[CacheEntry] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    updated: list[str] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def alerts(self) -> int:
        """Projects with at least one outdated package."""
        return sum(1 for e in self.entries if e.outdated_count > 0)


def _noop(message: str) -> None:
    pass


class BackgroundChecker:
    """Runs the periodic scan.

    Args:
        engine: Engine providing discovery and resolution.
        store: Cache store to write.
        on_progress: Called with one human-readable line per step.
    """

    def __init__(
        self,
        engine: DepsonarEngine,
        store: CacheStore,
        on_progress: Callable[[str], None] | None = None,
    ) -> None:
        self.engine = engine
        self.store = store
        self.on_progress = on_progress or _noop

    def run(self) -> CheckResult:
        """Execute one full check.

        Raises:
            ScanInProgressError: If another run is in progress.
        """
        if not _SCAN_LOCK.acquire(blocking=False):
            raise ScanInProgressError("A scan is already running.")
        try:
            return self._run()
        finally:
            _SCAN_LOCK.release()

    def _run(self) -> CheckResult:
        start = time.monotonic()
        result = CheckResult()
        projects = self.engine.discover_projects()
        if not projects:
            self.on_progress("No projects found. Configure with ~/.depsonarrc.json")
            return result

        self.on_progress(f"Scanning {len(projects)} projects...")
        for info in projects:
            entry = self._scan_one(info, result)
            if entry is not None:
                result.entries.append(entry)
        self.store.write(result.entries)

        self._auto_update(projects, result)

        result.elapsed = time.monotonic() - start
        self.on_progress(
            f"Done in {result.elapsed:.1f}s. {len(result.entries)} projects, "
            f"{result.alerts} need attention."
        )
        return result

    def _scan_one(self, info: ProjectInfo, result: CheckResult) -> CacheEntry | None:
        try:
            entry = self.engine.summarize(info)
        except Exception as exc:
            logger.warning("Failed to scan %s", info.name, exc_info=True)
            result.errors[info.name] = str(exc)
            self.on_progress(f"  {info.name}: error")
            return None
        status = "ok" if entry.outdated_count == 0 else f"{entry.outdated_count} outdated"
        self.on_progress(f"  {info.name}: {status}")
        return entry

    def _auto_update(self, projects: list[ProjectInfo], result: CheckResult) -> None:
        auto = set(self.engine.config.auto_update)
        if not auto:
            return
        by_name = {p.name: p for p in projects}
        targets = [
            by_name[e.project]
            for e in result.entries
            if e.project in auto and e.outdated_count > 0 and e.project in by_name
        ]
        if not targets:
            return

        self.on_progress(f"Auto-updating {len(targets)} project(s)...")
        for info in targets:
            command = self.engine.build_update_command(info, None, UpdateLevel.MINOR)
            self.on_progress(f"  {info.name}: $ {command}")
            try:
                self.engine.run(command, info)
            except CommandError as exc:
                result.errors[info.name] = str(exc).splitlines()[0]
                self.on_progress(f"  {info.name}: {exc}")
                continue
            result.updated.append(info.name)
            self.on_progress(f"  {info.name}: updated")

        self.on_progress("Re-scanning auto-updated projects...")
        for info in targets:
            try:
                fresh = self.engine.summarize(info)
            except Exception:
                logger.warning("Re-scan failed for %s", info.name, exc_info=True)
                continue
            for idx, entry in enumerate(result.entries):
                if entry.project == info.name:
                    result.entries[idx] = fresh
        self.store.write(result.entries)
