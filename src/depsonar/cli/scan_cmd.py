"""``depsonar scan`` -- List projects and their outdated-package counts.

Exit Codes:
    0 -- Scan completed.
    2 -- No projects found under the scanned directory.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from depsonar.cli.common import build_engine, echo_json, handle_errors
from depsonar.core.engine import DepsonarEngine
from depsonar.core.models import ProjectInfo
from depsonar.core.versions import is_major_update


def _scan_row(engine: DepsonarEngine, info: ProjectInfo) -> dict[str, Any]:
    """Resolve one project into a JSON-serializable summary row."""
    result = engine.resolve_outdated(info.path, info)
    ecosystem = engine.registry.get(info.language)
    return {
        "name": info.name,
        "path": info.path,
        "language": info.language,
        "languageName": ecosystem.name if ecosystem is not None else info.language,
        "framework": info.framework,
        "frameworkVersion": engine.get_framework_version(info),
        "packageManager": info.package_manager,
        "outdatedCount": len(result),
        "hasMajor": any(
            is_major_update(p.current, p.latest) for p in result.packages.values()
        ),
        "status": result.status.value,
    }


@click.command("scan")
@click.option(
    "--dir", "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to scan (default: configured projects directory).",
)
@click.option("--framework", default=None, help="Only projects whose framework contains this text.")
@click.option("--language", default=None, help="Only projects of this ecosystem key (e.g. node).")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON.")
@handle_errors
def scan_command(
    directory: Path | None,
    framework: str | None,
    language: str | None,
    json_output: bool,
) -> None:
    """Scan all projects and report outdated dependencies."""
    engine = build_engine()
    projects = engine.discover_projects(directory)
    if framework:
        projects = [p for p in projects if framework.lower() in p.framework.lower()]
    if language:
        projects = [p for p in projects if p.language == language.lower()]

    if not projects:
        if json_output:
            echo_json([])
        else:
            root = directory if directory is not None else engine.config.projects_dir
            click.echo(f"No projects found in {root}")
        sys.exit(2)

    rows = [_scan_row(engine, info) for info in projects]

    if json_output:
        echo_json(rows)
    else:
        from depsonar.cli.output import print_scan_summary
        print_scan_summary(rows)
