"""``depsonar update`` and ``depsonar update-all`` -- Apply updates.

Safety levels:
    patch   Patch releases only (npm); treated as minor elsewhere.
    minor   Stay within the current major version (default).
    latest  Jump to the newest release, majors included.

``update`` does nothing when the project is already current and otherwise
runs immediately unless ``--dry-run``. ``update-all`` only previews unless
``--apply``, since it touches every project at once.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import click

from depsonar.cli.common import LEVEL_CHOICE, build_engine, echo_json, handle_errors
from depsonar.exceptions import CommandError

logger = logging.getLogger(__name__)


@click.command("update")
@click.argument("project")
@click.argument("packages", nargs=-1)
@click.option("--level", type=LEVEL_CHOICE, default="minor", show_default=True,
              help="How far updates may go.")
@click.option("--dry-run", is_flag=True,
              help="Preview the outdated packages and the command without running it.")
@handle_errors
def update_command(project: str, packages: tuple[str, ...], level: str, dry_run: bool) -> None:
    """Update dependencies of PROJECT (optionally only PACKAGES)."""
    engine = build_engine()
    info = engine.resolve_project(project)
    before = engine.get_outdated(info.path, info)
    if not before:
        click.echo(f"{info.name}: all dependencies are already up to date.")
        return

    command = engine.build_update_command(info, list(packages) or None, level)
    if dry_run:
        from depsonar.cli.output import print_outdated
        print_outdated(before, info.language)
        click.echo(f"$ {command}")
        return

    click.echo(f"$ {command}")
    output = engine.run(command, info)
    if output.strip():
        click.echo(output.rstrip())
    remaining = engine.get_outdated(info.path, info)
    updated = max(0, len(before) - len(remaining))
    click.echo(
        f"Updated {info.name}: {updated} package(s) updated, "
        f"{len(remaining)} outdated package(s) remaining."
    )


@click.command("update-all")
@click.option("--level", type=LEVEL_CHOICE, default="minor", show_default=True,
              help="How far updates may go.")
@click.option("--dir", "directory", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Directory to scan (default: projects directory).")
@click.option("--framework", default=None, help="Only projects whose framework contains this text.")
@click.option("--language", default=None, help="Only projects of this ecosystem key.")
@click.option("--apply/--dry-run", "apply", default=False,
              help="Run the commands (default: preview only).")
@click.option("--json", "json_output", is_flag=True, help="Output results as JSON.")
@handle_errors
def update_all_command(
    level: str,
    directory: Path | None,
    framework: str | None,
    language: str | None,
    apply: bool,
    json_output: bool,
) -> None:
    """Update every project that has outdated dependencies."""
    engine = build_engine()
    projects = engine.discover_projects(directory)
    if framework:
        projects = [p for p in projects if framework.lower() in p.framework.lower()]
    if language:
        projects = [p for p in projects if p.language == language.lower()]

    results: list[dict[str, Any]] = []
    for info in projects:
        before = engine.get_outdated(info.path, info)
        if not before:
            continue
        command = engine.build_update_command(info, None, level)
        row: dict[str, Any] = {
            "name": info.name,
            "command": command,
            "updated": 0,
            "remaining": len(before),
        }
        if apply:
            try:
                engine.run(command, info)
            except CommandError as exc:
                logger.warning("%s: update failed", info.name, exc_info=True)
                row["error"] = str(exc).splitlines()[0]
            else:
                after = engine.get_outdated(info.path, info)
                row["updated"] = max(0, len(before) - len(after))
                row["remaining"] = len(after)
        results.append(row)

    if json_output:
        echo_json({"dryRun": not apply, "projects": results})
        return
    if not results:
        click.echo("All projects are up to date.")
        return
    from depsonar.cli.output import print_batch_results
    print_batch_results(results, dry_run=not apply)
    if not apply:
        click.echo("Dry run. Re-run with --apply to execute.")
