"""End-to-end tests for ``DepsonarEngine`` with a scripted runner.

No real package manager is ever spawned: every external command goes
through ``FakeRunner``.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depsonar.core.models import OutdatedStatus
from depsonar.exceptions import ProjectNotFoundError

PNPM_OUTDATED = json.dumps({
    "svelte": {"current": "4.1.0", "wanted": "4.2.0", "latest": "5.0.0",
               "type": "dependencies"},
})


@pytest.fixture
def pnpm_project(make_project):
    return make_project("blog", {
        "package.json": {
            "name": "my-blog",
            "dependencies": {"@sveltejs/kit": "^2.5.0", "svelte": "^4.1.0"},
        },
        "pnpm-lock.yaml": "lockfileVersion: '9.0'\n",
    })


class TestGoWithoutToolchain:
    """A Go project on a machine without ``go``."""

    def test_outdated_is_empty_and_nothing_runs(self, make_project, make_engine, fake_runner) -> None:
        path = make_project("tool", {"go.mod": "module github.com/me/tool\n\ngo 1.22\n",
                                     "go.sum": ""})
        runner = fake_runner()
        engine = make_engine(runner)
        info = engine.classify(path)
        assert info is not None and info.language == "go"
        assert engine.get_outdated(path, info) == {}
        assert runner.calls == []

    def test_result_reports_tool_absent(self, make_project, make_engine) -> None:
        path = make_project("tool", {"go.mod": "module example.com/tool\n"})
        engine = make_engine()
        result = engine.resolve_outdated(path, engine.classify(path))
        assert result.status is OutdatedStatus.TOOL_ABSENT
        assert "go" in result.reason

    def test_health_is_perfect_with_lockfile(self, make_project, make_engine) -> None:
        path = make_project("tool", {"go.mod": "module example.com/tool\n", "go.sum": ""})
        engine = make_engine()
        report = engine.compute_health_report(engine.classify(path))
        assert report.score == 100
        assert report.recommendations == ["All good! Dependencies are up to date."]

    def test_health_without_lockfile(self, make_project, make_engine) -> None:
        path = make_project("tool", {"go.mod": "module example.com/tool\n"})
        engine = make_engine()
        report = engine.compute_health_report(engine.classify(path))
        assert report.score == 85
        assert report.lockfile_exists is False


class TestPnpmProject:
    """A SvelteKit project managed by pnpm with one major update."""

    def test_outdated(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm outdated --json": PNPM_OUTDATED}, installed={"pnpm"})
        engine = make_engine(runner)
        info = engine.classify(pnpm_project)
        outdated = engine.get_outdated(pnpm_project, info)
        assert list(outdated) == ["svelte"]
        assert outdated["svelte"].latest == "5.0.0"
        assert outdated["svelte"].type == "dependencies"
        assert runner.calls[0] == ("pnpm outdated --json", pnpm_project)

    def test_health_report(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm outdated --json": PNPM_OUTDATED}, installed={"pnpm"})
        engine = make_engine(runner)
        report = engine.compute_health_report(engine.classify(pnpm_project))
        assert report.score == 87
        assert report.outdated_count == 1
        assert report.major_updates == 1
        assert report.security_issues == 0
        assert report.framework == "SvelteKit"
        assert report.framework_version == "^2.5.0"
        assert report.package_manager == "pnpm"
        assert report.recommendations == [
            "1 major update(s). Review changelogs before updating."
        ]

    def test_health_counts_audit_findings(self, pnpm_project, make_engine, fake_runner) -> None:
        audit = json.dumps({"metadata": {"vulnerabilities": {"high": 1, "critical": 1}}})
        runner = fake_runner(
            {"pnpm outdated --json": PNPM_OUTDATED, "pnpm audit --json": audit},
            installed={"pnpm"},
        )
        engine = make_engine(runner)
        report = engine.compute_health_report(engine.classify(pnpm_project))
        assert report.security_issues == 2
        assert report.score == 77

    def test_report_serializes_camel_case(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm outdated --json": PNPM_OUTDATED}, installed={"pnpm"})
        engine = make_engine(runner)
        data = engine.compute_health_report(engine.classify(pnpm_project)).to_dict()
        assert data["majorUpdates"] == 1
        assert data["lockfileExists"] is True

    def test_ignored_packages_are_filtered(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm outdated --json": PNPM_OUTDATED}, installed={"pnpm"})
        engine = make_engine(runner, ignored=["svelte"])
        assert engine.get_outdated(pnpm_project, engine.classify(pnpm_project)) == {}


class TestFailureDegradation:
    """Tool failures and bad output become empty results, never exceptions."""

    def test_tool_failure(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner(installed={"pnpm"}, failures={"pnpm outdated --json": "boom"})
        engine = make_engine(runner)
        result = engine.resolve_outdated(pnpm_project, engine.classify(pnpm_project))
        assert result.status is OutdatedStatus.TOOL_FAILED
        assert result.packages == {}
        assert "boom" in result.reason

    def test_unparseable_output(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm outdated --json": "ERR_PNPM something"}, installed={"pnpm"})
        engine = make_engine(runner)
        result = engine.resolve_outdated(pnpm_project, engine.classify(pnpm_project))
        assert result.status is OutdatedStatus.PARSE_FAILED
        assert engine.get_outdated(pnpm_project, engine.classify(pnpm_project)) == {}

    def test_empty_output_is_confirmed_up_to_date(self, pnpm_project, make_engine, fake_runner) -> None:
        engine = make_engine(fake_runner(installed={"pnpm"}))
        result = engine.resolve_outdated(pnpm_project, engine.classify(pnpm_project))
        assert result.ok
        assert len(result) == 0

    def test_audit_failure_counts_zero(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner(installed={"pnpm"}, failures={"pnpm audit --json": "network"})
        engine = make_engine(runner)
        assert engine.get_security_issues(pnpm_project, engine.classify(pnpm_project)) == 0

    def test_no_audit_tool_for_dart(self, make_project, make_engine, fake_runner) -> None:
        path = make_project("app", {"pubspec.yaml": "name: app\n"})
        runner = fake_runner(installed={"dart"})
        engine = make_engine(runner)
        assert engine.get_security_issues(path, engine.classify(path)) == 0
        assert runner.calls == []

    def test_audit_keeps_reason_for_zero(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm audit --json": "not json"}, installed={"pnpm"})
        engine = make_engine(runner)
        result = engine.audit(pnpm_project, engine.classify(pnpm_project))
        assert (result.vulnerabilities, result.error) == (0, "unrecognized audit output")
        assert result.command == "pnpm audit --json"


class TestProjectResolution:

    def test_by_manifest_name(self, pnpm_project, make_engine) -> None:
        engine = make_engine()
        assert engine.resolve_project("my-blog").path == str(pnpm_project.resolve())

    def test_by_directory_name(self, pnpm_project, make_engine) -> None:
        engine = make_engine()
        assert engine.resolve_project("blog").name == "my-blog"

    def test_by_path(self, pnpm_project, make_engine) -> None:
        engine = make_engine()
        assert engine.resolve_project(str(pnpm_project)).name == "my-blog"

    def test_unknown_raises(self, projects_dir: Path, make_engine) -> None:
        engine = make_engine()
        with pytest.raises(ProjectNotFoundError, match="nope"):
            engine.resolve_project("nope")


class TestSummarizeAndRun:

    def test_summarize_uses_quick_score(self, make_project, make_engine, fake_runner) -> None:
        # No lockfile: the quick score does not penalize it.
        path = make_project("web", {"package.json": {"name": "web"}})
        outdated = json.dumps({"react": {"current": "17.0.2", "latest": "18.3.1"}})
        runner = fake_runner({"npm outdated --json": outdated}, installed={"npm"})
        engine = make_engine(runner)
        entry = engine.summarize(engine.classify(path))
        assert entry.outdated_count == 1
        assert entry.major_count == 1
        assert entry.score == 87
        assert entry.security_issues == 0
        assert entry.checked_at

    def test_run_uses_project_directory(self, pnpm_project, make_engine, fake_runner) -> None:
        runner = fake_runner({"pnpm install": "done"})
        engine = make_engine(runner)
        info = engine.classify(pnpm_project)
        assert engine.run(engine.build_install_command(info), info) == "done"
        assert runner.calls == [("pnpm install", Path(info.path))]
