"""Persisted snapshot of the last background scan.

The background checker writes ``~/.depsonar-cache.json`` after every run::

    {
      "version": "4.0.0",
      "updatedAt": "2026-10-16T08:00:00.000000+00:00",
      "projects": [{"project": "api", "outdatedCount": 3, ...}]
    }

Readers treat a file older than ``CACHE_MAX_AGE`` (by modification time) as
absent, so interactive callers fall back to a live scan. Writes replace the
whole file; concurrent writers race and the last one wins.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from depsonar import __version__
from depsonar.core.models import CacheEntry, CacheFile

logger = logging.getLogger(__name__)

CACHE_FILENAME = ".depsonar-cache.json"
CACHE_MAX_AGE: float = 6 * 60 * 60  # seconds


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def default_cache_path(home: Path | None = None) -> Path:
    return (home if home is not None else Path.home()) / CACHE_FILENAME


def format_age(seconds: float) -> str:
    """Render an age as "Xh Ym ago" or "Ym ago"."""
    total_minutes = max(0, int(seconds // 60))
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours}h {minutes}m ago"
    return f"{minutes}m ago"


@dataclass
class CacheStatus:
    """Summary of the cache for status displays.

    Attributes:
        exists: True if a fresh cache is available.
        age: Human-readable age ("none" when absent).
        project_count: Number of cached entries.
        alerts: Entries with at least one outdated package.
    """

    exists: bool
    age: str = "none"
    project_count: int = 0
    alerts: int = 0


class CacheStore:
    """Reads and writes the cache file.

    Args:
        path: Cache file location. Defaults to ``~/.depsonar-cache.json``.
        max_age: Seconds after which the file counts as expired.
    """

    def __init__(self, path: Path | None = None, max_age: float = CACHE_MAX_AGE) -> None:
        self.path = path if path is not None else default_cache_path()
        self.max_age = max_age

    def write(self, entries: list[CacheEntry]) -> CacheFile:
        """Replace the cache with ``entries``.

        Creates parent directories if they do not exist.

        Returns:
            The ``CacheFile`` written.
        """
        cache = CacheFile(version=__version__, updated_at=utc_now_iso(), projects=list(entries))
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(cache.to_dict(), indent=2) + "\n", encoding="utf-8")
        return cache

    def read(self) -> CacheFile | None:
        """Read the cache.

        Returns:
            The ``CacheFile``, or None if missing, expired, or malformed.
        """
        try:
            age = time.time() - self.path.stat().st_mtime
        except OSError:
            return None
        if age > self.max_age:
            logger.debug("Cache %s expired (%.0fs old)", self.path, age)
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return CacheFile.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError, AttributeError):
            logger.warning("Ignoring malformed cache file %s", self.path, exc_info=True)
            return None

    def status(self) -> CacheStatus:
        """Summarize the cache: freshness, size, and alert count."""
        cache = self.read()
        if cache is None:
            return CacheStatus(exists=False)
        try:
            updated = datetime.fromisoformat(cache.updated_at)
            age = format_age((datetime.now(timezone.utc) - updated).total_seconds())
        except (ValueError, TypeError):
            age = "unknown"
        alerts = sum(1 for p in cache.projects if p.outdated_count > 0)
        return CacheStatus(
            exists=True, age=age, project_count=len(cache.projects), alerts=alerts,
        )
