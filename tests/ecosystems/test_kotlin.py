"""Tests for the Kotlin/Java (Gradle) ecosystem."""

from __future__ import annotations

import json

from depsonar.core.models import OutdatedStatus
from depsonar.ecosystems.kotlin import REPORT_PATH, parse_gradle_report

REPORT = json.dumps({
    "current": {"dependencies": [], "count": 0},
    "outdated": {"count": 2, "dependencies": [
        {"group": "org.jetbrains.kotlinx", "name": "kotlinx-coroutines-core",
         "version": "1.7.3", "available": {"release": "1.8.1", "milestone": None}},
        {"group": "com.squareup.okhttp3", "name": "okhttp",
         "version": "4.11.0", "available": {"release": None, "milestone": "5.0.0-alpha.14"}},
    ]},
})

TASK = "dependencyUpdates -Drevision=release --output-formatter json"


class TestParseGradleReport:

    def test_group_and_name(self) -> None:
        assert list(parse_gradle_report(REPORT)) == [
            "org.jetbrains.kotlinx:kotlinx-coroutines-core",
            "com.squareup.okhttp3:okhttp",
        ]

    def test_release_preferred_over_milestone(self) -> None:
        pkg = parse_gradle_report(REPORT)["org.jetbrains.kotlinx:kotlinx-coroutines-core"]
        assert (pkg.current, pkg.latest) == ("1.7.3", "1.8.1")

    def test_milestone_when_no_release(self) -> None:
        assert parse_gradle_report(REPORT)["com.squareup.okhttp3:okhttp"].latest == "5.0.0-alpha.14"


class TestKotlinResolve:

    def test_wrapper_runs_task_then_reads_report(self, make_project, make_engine, fake_runner) -> None:
        path = make_project("android", {
            "build.gradle.kts": "", "gradlew": "#!/bin/sh\n",
            str(REPORT_PATH): REPORT,
        })
        runner = fake_runner()
        engine = make_engine(runner)
        result = engine.resolve_outdated(path, engine.classify(path))
        assert runner.commands == [f"./gradlew {TASK}"]
        assert len(result) == 2

    def test_system_gradle_without_wrapper(self, make_project, make_engine, fake_runner) -> None:
        path = make_project("lib", {"build.gradle": ""})
        runner = fake_runner(installed={"gradle"})
        engine = make_engine(runner)
        result = engine.resolve_outdated(path, engine.classify(path))
        assert runner.commands == [f"gradle {TASK}"]
        assert result.status is OutdatedStatus.TOOL_FAILED
        assert "gradle-versions-plugin" in result.reason

    def test_no_gradle_at_all(self, make_project, make_engine) -> None:
        path = make_project("lib", {"build.gradle": ""})
        engine = make_engine()
        assert engine.resolve_outdated(path, engine.classify(path)).reason == (
            "gradle is not installed"
        )
