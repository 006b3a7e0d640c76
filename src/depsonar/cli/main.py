"""depsonar CLI: outdated dependencies across every project you own.

Entry point for the ``depsonar`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    scan        List projects and their outdated-package counts.
    check       Show outdated packages for one project.
    health      Compute a health score with recommendations.
    audit       Count known vulnerabilities per project.
    update      Update one project's dependencies.
    update-all  Update every project (dry run unless --apply).
    install     Fresh install, optionally after a clean.
    alerts      Show projects needing attention from the last checker run.
    config      Show or change configuration.
    checker     Run the background checker once.
    ecosystems  List supported ecosystems.

Usage::

    depsonar scan
    depsonar scan --language node --json
    depsonar check my-blog
    depsonar health ./api
    depsonar audit --json
    depsonar update my-blog svelte vite --level latest
    depsonar update-all --level patch --apply
    depsonar checker
"""

from __future__ import annotations

import logging

import click

from depsonar import __version__, _PRODUCT_ID
from depsonar.cli.alerts_cmd import alerts_command
from depsonar.cli.audit_cmd import audit_command
from depsonar.cli.check_cmd import check_command
from depsonar.cli.checker_cmd import checker_command
from depsonar.cli.config_cmd import config_command
from depsonar.cli.ecosystems_cmd import ecosystems_command
from depsonar.cli.health_cmd import health_command
from depsonar.cli.install_cmd import install_command
from depsonar.cli.scan_cmd import scan_command
from depsonar.cli.update_cmd import update_all_command, update_command


@click.group()
@click.version_option(version=f"{__version__} ({_PRODUCT_ID})")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """depsonar: Dependency radar for all your projects.

    Detects Node.js, Python, Rust, Go, PHP, Ruby, Dart, Swift and Kotlin
    projects, reports outdated packages with their native tools, and
    builds the commands to update them safely.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(scan_command)
cli.add_command(check_command)
cli.add_command(health_command)
cli.add_command(audit_command)
cli.add_command(update_command)
cli.add_command(update_all_command)
cli.add_command(install_command)
cli.add_command(alerts_command)
cli.add_command(config_command)
cli.add_command(checker_command)
cli.add_command(ecosystems_command)
