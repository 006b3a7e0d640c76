"""``depsonar health <project>`` -- Health score with recommendations.

Exit Codes:
    0 -- Score is at or above ``--min-score``.
    1 -- Score is below ``--min-score``.
"""

from __future__ import annotations

import sys

import click

from depsonar.cli.common import build_engine, echo_json, handle_errors


@click.command("health")
@click.argument("project")
@click.option("--json", "json_output", is_flag=True, help="Output the report as JSON.")
@click.option(
    "--min-score",
    type=click.IntRange(0, 100),
    default=0,
    help="Exit with code 1 when the score is below this value.",
)
@handle_errors
def health_command(project: str, json_output: bool, min_score: int) -> None:
    """Compute the dependency health score of a project."""
    engine = build_engine()
    info = engine.resolve_project(project)
    report = engine.compute_health_report(info)

    if json_output:
        echo_json(report.to_dict())
    else:
        from depsonar.cli.output import print_health_report
        print_health_report(report)

    if report.score < min_score:
        sys.exit(1)
