"""Shared fixtures for CLI tests.

Every CLI invocation builds its engine from the user's config, so these
fixtures point ``HOME`` and ``DEPSONAR_PROJECTS_DIR`` at temporary
directories and swap the shell runner for a ``FakeRunner``.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

PNPM_OUTDATED = json.dumps({
    "svelte": {"current": "4.1.0", "wanted": "4.2.0", "latest": "5.0.0"},
    "lodash": {"current": "4.17.20", "wanted": "4.17.21", "latest": "4.17.21"},
})


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    directory = tmp_path / "home"
    directory.mkdir()
    return directory


@pytest.fixture
def shell(monkeypatch, home: Path, projects_dir: Path, fake_runner):
    """Isolate the CLI from the real home directory and real tools.

    Returns the ``FakeRunner`` every engine built by the CLI will use.
    """
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("DEPSONAR_PROJECTS_DIR", str(projects_dir))
    monkeypatch.delenv("DEPUP_PROJECTS_DIR", raising=False)
    fake = fake_runner(installed={"pnpm"})
    monkeypatch.setattr("depsonar.core.engine.ShellRunner", lambda: fake)
    return fake


@pytest.fixture
def blog(make_project) -> Path:
    """A pnpm SvelteKit project named my-blog."""
    return make_project("blog", {
        "package.json": {
            "name": "my-blog",
            "dependencies": {"@sveltejs/kit": "^2.5.0", "svelte": "^4.1.0"},
            "devDependencies": {"lodash": "^4.17.20"},
        },
        "pnpm-lock.yaml": "",
    })


@pytest.fixture
def pnpm_outdated() -> str:
    """``pnpm outdated --json`` output for the blog project."""
    return PNPM_OUTDATED
