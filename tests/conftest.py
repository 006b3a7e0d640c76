"""Shared fixtures for depsonar tests.

Provides ``FakeRunner``, a scripted ``CommandRunner`` that never spawns a
process, and a factory fixture for building project directories on disk.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from depsonar.config import DepsonarConfig
from depsonar.core.engine import DepsonarEngine
from depsonar.core.runner import CommandRunner
from depsonar.exceptions import CommandError


class FakeRunner(CommandRunner):
    """Scripted command runner.

    Args:
        outputs: Command line to stdout. A list is consumed one item per
            call, repeating its last item. Unscripted commands return "".
        installed: Binaries ``exists`` reports as present.
        failures: Command line to error message; these raise ``CommandError``.
    """

    def __init__(
        self,
        outputs: dict[str, str | list[str]] | None = None,
        installed: Iterable[str] = (),
        failures: dict[str, str] | None = None,
    ) -> None:
        self.outputs = dict(outputs or {})
        self.installed = set(installed)
        self.failures = dict(failures or {})
        self.calls: list[tuple[str, Path]] = []

    def run(self, command: str, cwd: Path | str) -> str:
        self.calls.append((command, Path(cwd)))
        if command in self.failures:
            raise CommandError(command, self.failures[command], returncode=1)
        output = self.outputs.get(command, "")
        if isinstance(output, list):
            return output.pop(0) if len(output) > 1 else output[0]
        return output

    def exists(self, binary: str) -> bool:
        return binary in self.installed

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


ProjectFactory = Callable[..., Path]


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Return a factory creating ``tmp_path/projects/<name>`` with files.

    Values that are dicts or lists are written as JSON; strings verbatim.
    Keys ending in "/" create a directory.
    """

    def _make(name: str, files: dict[str, object] | None = None) -> Path:
        directory = tmp_path / "projects" / name
        directory.mkdir(parents=True, exist_ok=True)
        for rel, content in (files or {}).items():
            target = directory / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                target.write_text(json.dumps(content))
            else:
                target.write_text(str(content))
        return directory

    return _make


@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "projects"
    directory.mkdir(exist_ok=True)
    return directory


@pytest.fixture
def make_engine(projects_dir: Path) -> Callable[..., DepsonarEngine]:
    """Return a factory for engines bound to ``projects_dir`` and a runner."""

    def _make(
        runner: CommandRunner | None = None,
        ignored: list[str] | None = None,
        auto_update: list[str] | None = None,
    ) -> DepsonarEngine:
        config = DepsonarConfig(
            projects_dir=projects_dir,
            ignored_packages=list(ignored or []),
            auto_update=list(auto_update or []),
        )
        return DepsonarEngine(runner=runner or FakeRunner(), config=config)

    return _make


@pytest.fixture
def svelte_package_json() -> dict:
    return {
        "name": "my-blog",
        "engines": {"node": ">=20"},
        "dependencies": {"@sveltejs/kit": "^2.5.0", "svelte": "^4.1.0"},
        "devDependencies": {"vite": "^5.0.0"},
    }


@pytest.fixture
def fake_runner() -> type[FakeRunner]:
    """The ``FakeRunner`` class, for tests that script their own commands."""
    return FakeRunner
