"""``depsonar checker`` -- Run the background checker once.

Intended for cron or launchd. Progress lines go to stderr prefixed with
``[depsonar]``; the cache is written to ``~/.depsonar-cache.json``.

Exit Codes:
    0 -- Check completed.
    1 -- Another check is already running, or a fatal error occurred.
"""

from __future__ import annotations

from pathlib import Path

import click

from depsonar.cache import CacheStore
from depsonar.checker import BackgroundChecker
from depsonar.cli.common import build_engine, handle_errors


def _progress(message: str) -> None:
    click.echo(f"[depsonar] {message}", err=True)


@click.command("checker")
@click.option("--cache", "cache_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="Cache file (default: ~/.depsonar-cache.json).")
@handle_errors
def checker_command(cache_path: Path | None) -> None:
    """Scan every project and write the alerts cache."""
    checker = BackgroundChecker(build_engine(), CacheStore(cache_path), on_progress=_progress)
    result = checker.run()
    for name, error in result.errors.items():
        click.echo(f"[depsonar] {name} failed: {error}", err=True)
