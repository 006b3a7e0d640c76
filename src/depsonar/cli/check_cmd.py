"""``depsonar check <project>`` -- Show outdated packages for one project.

Node.js projects are grouped by package family (svelte, react, ...); major
updates are flagged.
"""

from __future__ import annotations

import click

from depsonar.cli.common import build_engine, echo_json, handle_errors
from depsonar.core.grouping import group_by_ecosystem
from depsonar.core.versions import classify_update


@click.command("check")
@click.argument("project")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON.")
@handle_errors
def check_command(project: str, json_output: bool) -> None:
    """Check one project for outdated dependencies.

    PROJECT is a directory path or a project name under the projects
    directory.
    """
    engine = build_engine()
    info = engine.resolve_project(project)
    result = engine.resolve_outdated(info.path, info)

    if json_output:
        groups = group_by_ecosystem(result.packages) if info.language == "node" else {}
        echo_json({
            "project": info.name,
            "path": info.path,
            "language": info.language,
            "framework": info.framework,
            "packageManager": info.package_manager,
            "status": result.status.value,
            "reason": result.reason,
            "outdated": {
                name: {
                    "current": pkg.current,
                    "wanted": pkg.wanted,
                    "latest": pkg.latest,
                    "type": pkg.type,
                    "update": classify_update(pkg.current, pkg.latest).value,
                }
                for name, pkg in result.packages.items()
            },
            "groups": {group: [name for name, _ in rows] for group, rows in groups.items()},
        })
        return

    from depsonar.cli.output import print_outdated, print_project_header
    ecosystem = engine.registry.get(info.language)
    print_project_header(
        info,
        ecosystem.name if ecosystem is not None else info.language,
        engine.get_framework_version(info),
    )
    print_outdated(result.packages, info.language, note="" if result.ok else result.reason)
