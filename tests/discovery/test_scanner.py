"""Tests for ProjectScanner discovery over a projects directory."""

from __future__ import annotations

from pathlib import Path

from depsonar.discovery.scanner import ProjectScanner


class TestDiscover:

    def test_missing_root_is_empty(self, tmp_path: Path) -> None:
        assert ProjectScanner().discover(tmp_path / "nowhere") == []

    def test_skips_hidden_and_node_modules(self, make_project, projects_dir: Path) -> None:
        make_project(".cache", {"package.json": {}})
        make_project("node_modules", {"package.json": {}})
        make_project("app", {"package.json": {}})
        names = [p.name for p in ProjectScanner().discover(projects_dir)]
        assert names == ["app"]

    def test_non_projects_and_files_are_ignored(self, make_project, projects_dir: Path) -> None:
        make_project("docs", {"README.md": ""})
        (projects_dir / "loose-file.txt").write_text("")
        make_project("api", {"go.mod": "module example.com/api\n"})
        assert [p.name for p in ProjectScanner().discover(projects_dir)] == ["api"]

    def test_sorted_case_insensitively(self, make_project, projects_dir: Path) -> None:
        make_project("zeta", {"Gemfile": ""})
        make_project("Beta", {"Cargo.toml": ""})
        make_project("alpha", {"composer.json": {}})
        names = [p.name for p in ProjectScanner().discover(projects_dir)]
        assert names == ["alpha", "Beta", "zeta"]

    def test_sort_uses_display_name(self, make_project, projects_dir: Path) -> None:
        make_project("a-dir", {"package.json": {"name": "zz-last"}})
        make_project("b-dir", {"package.json": {}})
        names = [p.name for p in ProjectScanner().discover(projects_dir)]
        assert names == ["b-dir", "zz-last"]

    def test_nested_projects_not_discovered(self, make_project, projects_dir: Path) -> None:
        make_project("group/inner", {"package.json": {}})
        assert ProjectScanner().discover(projects_dir) == []
