"""``depsonar ecosystems`` -- List supported ecosystems in detection order."""

from __future__ import annotations

import click
from rich.table import Table

from depsonar.cli.common import echo_json
from depsonar.ecosystems.registry import default_registry


@click.command("ecosystems")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON.")
def ecosystems_command(json_output: bool) -> None:
    """List supported ecosystems with their marker files and tools."""
    registry = default_registry()

    if json_output:
        echo_json([
            {
                "key": e.key,
                "name": e.name,
                "markerFiles": list(e.marker_files),
                "outdatedCommand": e.outdated_cmd,
                "auditCommand": e.audit_cmd,
            }
            for e in registry
        ])
        return

    from depsonar.cli.output import console
    table = Table(title=f"Supported Ecosystems ({len(registry)})", show_header=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="bold")
    table.add_column("Name")
    table.add_column("Markers")
    table.add_column("Outdated Command")
    for idx, ecosystem in enumerate(registry, start=1):
        table.add_row(
            str(idx), ecosystem.key, ecosystem.name,
            ", ".join(ecosystem.marker_files), ecosystem.outdated_cmd,
        )
    console.print(table)
