"""``depsonar alerts`` -- Projects needing attention, from the checker cache.

Reads ``~/.depsonar-cache.json`` without running any tool. A missing or
expired cache (older than six hours) prints a hint to run the checker.
"""

from __future__ import annotations

from pathlib import Path

import click

from depsonar.cache import CacheStore
from depsonar.cli.common import echo_json, handle_errors


@click.command("alerts")
@click.option("--cache", "cache_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Cache file (default: ~/.depsonar-cache.json).")
@click.option("--json", "json_output", is_flag=True, help="Output the cache as JSON.")
@handle_errors
def alerts_command(cache_path: Path | None, json_output: bool) -> None:
    """Show projects with outdated dependencies from the last check."""
    store = CacheStore(cache_path)
    cache = store.read()
    if cache is None:
        click.echo("No recent scan. Run `depsonar checker` first.")
        return

    if json_output:
        echo_json(cache.to_dict())
        return

    from depsonar.cli.output import print_cache_alerts
    print_cache_alerts(cache)
    status = store.status()
    click.echo(f"Cache: {status.project_count} projects, updated {status.age}")
