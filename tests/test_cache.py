"""Tests for the cache store: round-trip, expiry, and status."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path

import pytest

from depsonar import __version__
from depsonar.cache import CACHE_MAX_AGE, CacheStore, format_age
from depsonar.core.models import CacheEntry


def _entry(project: str, outdated: int = 0) -> CacheEntry:
    return CacheEntry(
        project=project, path=f"/p/{project}", language="node", framework="SvelteKit",
        outdated_count=outdated, major_count=0, security_issues=0,
        score=100 - 3 * outdated, checked_at="2026-10-16T08:00:00+00:00",
    )


@pytest.fixture
def store(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / "cache" / ".depsonar-cache.json")


class TestWriteAndRead:

    def test_read_returns_written_entries(self, store: CacheStore) -> None:
        store.write([_entry("api", 2), _entry("blog")])
        cache = store.read()
        assert cache is not None
        assert cache.version == __version__
        assert [p.project for p in cache.projects] == ["api", "blog"]
        assert cache.projects[0].outdated_count == 2

    def test_file_uses_camel_case_keys(self, store: CacheStore) -> None:
        store.write([_entry("api", 1)])
        data = json.loads(store.path.read_text())
        assert "updatedAt" in data
        assert data["projects"][0]["outdatedCount"] == 1
        assert data["projects"][0]["checkedAt"]

    def test_missing_file(self, store: CacheStore) -> None:
        assert store.read() is None

    def test_malformed_file(self, store: CacheStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text("{")
        assert store.read() is None


class TestExpiry:

    def test_older_than_six_hours_is_absent(self, store: CacheStore) -> None:
        store.write([_entry("api")])
        old = time.time() - CACHE_MAX_AGE - 60
        os.utime(store.path, (old, old))
        assert store.read() is None

    def test_recent_file_is_present(self, store: CacheStore) -> None:
        store.write([_entry("api")])
        recent = time.time() - CACHE_MAX_AGE + 600
        os.utime(store.path, (recent, recent))
        assert store.read() is not None


class TestStatus:

    def test_absent(self, store: CacheStore) -> None:
        status = store.status()
        assert status.exists is False
        assert status.age == "none"

    def test_counts_alerts(self, store: CacheStore) -> None:
        store.write([_entry("api", 2), _entry("blog"), _entry("cli", 5)])
        status = store.status()
        assert status.exists is True
        assert status.project_count == 3
        assert status.alerts == 2
        assert status.age.endswith("m ago")


class TestFormatAge:

    def test_minutes(self) -> None:
        assert format_age(125) == "2m ago"

    def test_hours_and_minutes(self) -> None:
        assert format_age(3 * 3600 + 15 * 60) == "3h 15m ago"

    def test_negative_clamps(self) -> None:
        assert format_age(-5) == "0m ago"
