"""``depsonar install <project>`` -- Fresh dependency install."""

from __future__ import annotations

import click

from depsonar.cli.common import build_engine, handle_errors


@click.command("install")
@click.argument("project")
@click.option("--clean", is_flag=True, help="Remove installed dependencies first.")
@click.option("--dry-run", is_flag=True, help="Print the commands without running them.")
@handle_errors
def install_command(project: str, clean: bool, dry_run: bool) -> None:
    """Install dependencies of PROJECT with its package manager."""
    engine = build_engine()
    info = engine.resolve_project(project)

    commands: list[str] = []
    if clean:
        clean_cmd = engine.build_clean_command(info)
        if clean_cmd:
            commands.append(clean_cmd)
        else:
            click.echo(f"No clean step for {info.language}; skipping.")
    commands.append(engine.build_install_command(info))

    for command in commands:
        click.echo(f"$ {command}")
        if dry_run:
            continue
        output = engine.run(command, info)
        if output.strip():
            click.echo(output.rstrip())
