"""Tests for the background checker: batch scan, auto-update, in-flight lock."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from depsonar.cache import CacheStore
from depsonar.checker import BackgroundChecker
from depsonar.exceptions import ScanInProgressError

NPM_OUTDATED = json.dumps({"svelte": {"current": "4.1.0", "wanted": "4.2.0", "latest": "5.0.0"}})
UPDATE_CMD = "npx -y npm-check-updates -u --target minor && npm install"


@pytest.fixture
def store(tmp_path: Path) -> CacheStore:
    return CacheStore(tmp_path / ".depsonar-cache.json")


class TestBatchScan:

    def test_writes_one_entry_per_project(self, make_project, make_engine, fake_runner, store) -> None:
        make_project("blog", {"package.json": {"name": "blog"}})
        make_project("api", {"go.mod": "module example.com/api\n"})
        runner = fake_runner({"npm outdated --json": NPM_OUTDATED}, installed={"npm"})
        messages: list[str] = []
        result = BackgroundChecker(make_engine(runner), store, messages.append).run()

        assert [e.project for e in result.entries] == ["api", "blog"]
        assert result.alerts == 1
        cache = store.read()
        assert [p.project for p in cache.projects] == ["api", "blog"]
        assert messages[0] == "Scanning 2 projects..."
        assert "  blog: 1 outdated" in messages
        assert "  api: ok" in messages
        assert messages[-1].startswith("Done in ")

    def test_no_projects(self, make_engine, store) -> None:
        messages: list[str] = []
        result = BackgroundChecker(make_engine(), store, messages.append).run()
        assert result.entries == []
        assert messages == ["No projects found. Configure with ~/.depsonarrc.json"]
        assert not store.path.exists()

    def test_failing_project_does_not_stop_batch(
        self, make_project, make_engine, store, monkeypatch,
    ) -> None:
        make_project("a", {"go.mod": ""})
        make_project("b", {"go.mod": ""})
        engine = make_engine()
        original = engine.summarize

        def flaky(info):
            if info.name == "a":
                raise RuntimeError("disk on fire")
            return original(info)

        monkeypatch.setattr(engine, "summarize", flaky)
        result = BackgroundChecker(engine, store).run()
        assert [e.project for e in result.entries] == ["b"]
        assert result.errors == {"a": "disk on fire"}


class TestAutoUpdate:

    def test_updates_and_replaces_entry(self, make_project, make_engine, fake_runner, store) -> None:
        make_project("blog", {"package.json": {"name": "blog"}})
        make_project("site", {"package.json": {"name": "site"}})
        # blog scan, site scan, blog re-scan after the update
        runner = fake_runner(
            {"npm outdated --json": [NPM_OUTDATED, NPM_OUTDATED, "{}"]}, installed={"npm"},
        )
        engine = make_engine(runner, auto_update=["blog"])

        result = BackgroundChecker(engine, store).run()

        assert result.updated == ["blog"]
        assert runner.commands.count(UPDATE_CMD) == 1
        blog = next(e for e in result.entries if e.project == "blog")
        site = next(e for e in result.entries if e.project == "site")
        assert blog.outdated_count == 0
        assert blog.score == 100
        assert site.outdated_count == 1
        cached = {p.project: p.outdated_count for p in store.read().projects}
        assert cached == {"blog": 0, "site": 1}

    def test_up_to_date_projects_are_not_updated(
        self, make_project, make_engine, fake_runner, store,
    ) -> None:
        make_project("blog", {"package.json": {"name": "blog"}})
        runner = fake_runner(installed={"npm"})
        result = BackgroundChecker(make_engine(runner, auto_update=["blog"]), store).run()
        assert result.updated == []
        assert UPDATE_CMD not in runner.commands

    def test_failed_update_is_recorded(self, make_project, make_engine, fake_runner, store) -> None:
        make_project("blog", {"package.json": {"name": "blog"}})
        runner = fake_runner(
            {"npm outdated --json": NPM_OUTDATED},
            installed={"npm"},
            failures={UPDATE_CMD: "ERESOLVE"},
        )
        result = BackgroundChecker(make_engine(runner, auto_update=["blog"]), store).run()
        assert result.updated == []
        assert result.errors["blog"] == f"Command failed: {UPDATE_CMD}"
        assert store.read().projects[0].outdated_count == 1


class TestInFlightGuard:

    def test_second_concurrent_run_is_rejected(
        self, make_project, make_engine, store, monkeypatch,
    ) -> None:
        make_project("api", {"go.mod": ""})
        engine = make_engine()
        started = threading.Event()
        release = threading.Event()
        original = engine.summarize

        def slow(info):
            started.set()
            release.wait(timeout=5)
            return original(info)

        monkeypatch.setattr(engine, "summarize", slow)
        checker = BackgroundChecker(engine, store)
        worker = threading.Thread(target=checker.run)
        worker.start()
        try:
            assert started.wait(timeout=5)
            with pytest.raises(ScanInProgressError):
                BackgroundChecker(engine, store).run()
        finally:
            release.set()
            worker.join(timeout=5)

    def test_lock_released_after_run(self, make_engine, store) -> None:
        checker = BackgroundChecker(make_engine(), store)
        checker.run()
        checker.run()
