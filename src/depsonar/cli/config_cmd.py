"""``depsonar config`` -- Show or change the user configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from depsonar.cli.common import echo_json, handle_errors
from depsonar.config import load_config, save_config
from depsonar.exceptions import ConfigError


@click.command("config")
@click.option("--projects-dir", type=click.Path(file_okay=False, path_type=Path),
              default=None, help="Set the directory whose projects are scanned.")
@click.option("--ignore", "ignore", multiple=True,
              help="Add a package to ignoredPackages (repeatable).")
@click.option("--auto-update", "auto_update", multiple=True,
              help="Add a project to autoUpdate (repeatable).")
@click.option("--json", "json_output", is_flag=True, help="Output the configuration as JSON.")
@handle_errors
def config_command(
    projects_dir: Path | None,
    ignore: tuple[str, ...],
    auto_update: tuple[str, ...],
    json_output: bool,
) -> None:
    """Show the configuration, or update it when options are given."""
    current = load_config()
    updates: dict[str, Any] = {}
    if projects_dir is not None:
        resolved = projects_dir.expanduser()
        if not resolved.is_dir():
            raise ConfigError(f"Not a directory: {resolved}")
        updates["projectsDir"] = str(resolved.resolve())
    if ignore:
        updates["ignoredPackages"] = sorted(set(current.ignored_packages) | set(ignore))
    if auto_update:
        updates["autoUpdate"] = sorted(set(current.auto_update) | set(auto_update))

    if updates:
        path = save_config(updates)
        click.echo(f"Saved {path}")
        current = load_config()

    data = {
        "projectsDir": str(current.projects_dir),
        "ignoredPackages": current.ignored_packages,
        "autoUpdate": current.auto_update,
        "configFile": str(current.config_path) if current.config_path else None,
    }
    if json_output:
        echo_json(data)
        return
    for key, value in data.items():
        if isinstance(value, list):
            value = ", ".join(value) if value else "(none)"
        click.echo(f"{key}: {value if value is not None else '(none)'}")
