"""``depsonar audit [project]`` -- Known vulnerabilities per project.

Runs each ecosystem's audit tool (npm/pnpm/yarn audit, cargo audit,
pip-audit, composer audit, govulncheck, bundle-audit) and reports the
vulnerability count. Projects whose tool is missing or fails are listed
with the reason instead of a count.

Exit Codes:
    0 -- No vulnerabilities reported.
    1 -- At least one project has vulnerabilities.
    2 -- No projects found under the scanned directory.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from depsonar.cli.common import build_engine, echo_json, handle_errors


@click.command("audit")
@click.argument("project", required=False)
@click.option(
    "--dir", "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory to scan when no PROJECT is given.",
)
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON.")
@handle_errors
def audit_command(project: str | None, directory: Path | None, json_output: bool) -> None:
    """Audit PROJECT, or every discovered project, for known vulnerabilities."""
    engine = build_engine()
    if project:
        projects = [engine.resolve_project(project)]
    else:
        projects = engine.discover_projects(directory)

    if not projects:
        if json_output:
            echo_json([])
        else:
            root = directory if directory is not None else engine.config.projects_dir
            click.echo(f"No projects found in {root}")
        sys.exit(2)

    results = [engine.audit(info.path, info) for info in projects]

    if json_output:
        echo_json([r.to_dict() for r in results])
    else:
        from depsonar.cli.output import print_audit_results
        print_audit_results(results)

    if any(r.vulnerabilities for r in results):
        sys.exit(1)
