"""Go ecosystem: module-mode projects.

``go list -m -u -json all`` prints one pretty-printed JSON object per
module, back to back, with no enclosing array and no newline-delimited
framing. The parser splits on the closing-brace boundary (``\\n}\\n``),
restores the brace each fragment lost to the separator, and decodes fragments
independently. A fragment that fails to decode is skipped without
affecting the others.

Only modules carrying an ``Update`` field have a newer version. Keys are
the last two path segments (``github.com/spf13/cobra`` -> ``spf13/cobra``).
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from depsonar.core.models import ManifestData, OutdatedPackage, ProjectInfo
from depsonar.core.runner import CommandRunner
from depsonar.ecosystems.base import Ecosystem, read_text_file

logger = logging.getLogger(__name__)

_MODULE_LINE = re.compile(r"module\s+(\S+)")


def split_json_objects(raw: str) -> list[str]:
    """Split concatenated pretty-printed JSON objects into fragments."""
    fragments: list[str] = []
    chunks = raw.split("\n}\n")
    for idx, chunk in enumerate(chunks):
        chunk = chunk.strip()
        if not chunk:
            continue
        # Every chunk but the last lost its closing brace to the separator.
        if idx < len(chunks) - 1:
            chunk += "\n}"
        fragments.append(chunk)
    return fragments


def parse_go_outdated(raw: str) -> dict[str, OutdatedPackage]:
    """Parse ``go list -m -u -json all`` output."""
    result: dict[str, OutdatedPackage] = {}
    for fragment in split_json_objects(raw):
        try:
            module = json.loads(fragment)
        except ValueError:
            logger.debug("Skipping malformed go list fragment: %.60s", fragment)
            continue
        if not isinstance(module, dict):
            continue
        update = module.get("Update")
        version = module.get("Version")
        if not isinstance(update, dict) or not update.get("Version") or not version:
            continue
        name = "/".join(str(module.get("Path", "")).split("/")[-2:])
        result[name] = OutdatedPackage(
            current=str(version),
            wanted=str(update["Version"]),
            latest=str(update["Version"]),
        )
    return result


class GoEcosystem(Ecosystem):
    """Go projects identified by ``go.mod``."""

    key = "go"
    name = "Go"
    marker_files = ("go.mod",)
    lockfiles = ("go.sum",)
    outdated_cmd = "go list -m -u -json all"
    update_cmd = "go get -u ./..."
    update_latest_cmd = "go get -u ./..."
    install_cmd = "go mod download"
    clean_cmd = "go clean -modcache"
    audit_cmd = "govulncheck -json ./..."

    def read_manifest(self, path: Path) -> ManifestData:
        text = read_text_file(path / "go.mod")
        match = _MODULE_LINE.search(text) if text else None
        if not match:
            return ManifestData()
        return ManifestData(name=match.group(1).split("/")[-1] or None)

    def missing_tool(self, path: Path, info: ProjectInfo, runner: CommandRunner) -> str | None:
        return None if runner.exists("go") else "go"

    def parse_outdated(self, raw: str) -> dict[str, OutdatedPackage]:
        return parse_go_outdated(raw)
