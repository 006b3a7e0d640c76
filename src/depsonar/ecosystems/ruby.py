"""Ruby ecosystem: Bundler projects.

``bundle outdated --parseable`` prints free text, one gem per line::

    rack (newest 3.0.8, installed 2.2.7, requested ~> 2.2)

Lines that do not match are ignored (Bundler mixes in status chatter).
"""

from __future__ import annotations

import re
from pathlib import Path

from depsonar.core.models import OutdatedPackage, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem

_GEM_LINE = re.compile(r"(\S+)\s+\(newest\s+(\S+),\s+installed\s+(\S+)")


def parse_bundle_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``bundle outdated --parseable`` output."""
    result: dict[str, OutdatedPackage] = {}
    for line in raw.splitlines():
        match = _GEM_LINE.search(line)
        if match:
            name, newest, installed = match.groups()
            result[name] = OutdatedPackage(
                current=installed.rstrip(",)"),
                wanted=newest,
                latest=newest,
            )
    return result


class RubyEcosystem(Ecosystem):
    """Ruby projects identified by ``Gemfile``."""

    key = "ruby"
    name = "Ruby"
    marker_files = ("Gemfile",)
    lockfiles = ("Gemfile.lock",)
    outdated_cmd = "bundle outdated --parseable"
    update_cmd = "bundle update"
    update_latest_cmd = "bundle update"
    install_cmd = "bundle install"
    clean_cmd = "rm -rf vendor/bundle"
    audit_cmd = "bundle-audit check --format json"

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        return None if runner.exists("bundle") else "bundle"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_bundle_outdated(raw)
