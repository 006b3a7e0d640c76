"""Rich output formatting helpers for the depsonar CLI.

Score Color Mapping:
    >= 80 green, >= 50 yellow, below 50 bold red.
Major updates are flagged in bold red.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from depsonar.core.grouping import group_by_ecosystem
from depsonar.core.models import (
    AuditResult,
    CacheFile,
    HealthReport,
    OutdatedPackage,
    ProjectInfo,
)
from depsonar.core.versions import is_major_update

console = Console()


def score_style(score: int) -> str:
    """Return the Rich style string for a health score."""
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "bold red"


def _outdated_table(title: str, rows: list[tuple[str, OutdatedPackage]]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold", title_justify="left")
    table.add_column("Package", style="bold")
    table.add_column("Current")
    table.add_column("Wanted")
    table.add_column("Latest")
    table.add_column("", justify="center")
    for name, pkg in rows:
        flag = Text("MAJOR", style="bold red") if is_major_update(pkg.current, pkg.latest) else Text("")
        table.add_row(name, pkg.current, pkg.wanted, pkg.latest, flag)
    return table


def print_project_header(info: ProjectInfo, language_name: str, framework_version: str | None) -> None:
    """Print the project identity panel."""
    framework = f"{info.framework} ({framework_version})" if framework_version else info.framework
    header = Text.assemble(
        ("Language: ", "bold"), (language_name, ""),
        ("  Framework: ", "bold"), (framework, ""),
        ("  Package manager: ", "bold"), (info.package_manager, ""),
    )
    console.print(Panel(header, title=info.name, subtitle=info.path))


def print_outdated(outdated: dict[str, OutdatedPackage], language: str, note: str = "") -> None:
    """Print outdated packages, grouped by family for Node projects.

    Args:
        outdated: Package name to ``OutdatedPackage``.
        language: Ecosystem key of the project.
        note: Shown instead of the all-clear when the lookup could not run.
    """
    if not outdated:
        if note:
            console.print(f"[yellow]Could not check dependencies: {note}[/yellow]")
        else:
            console.print("[green]All dependencies are up to date.[/green]")
        return

    console.print(f"[bold]{len(outdated)}[/bold] outdated package(s)")
    if language == "node":
        for group, rows in group_by_ecosystem(outdated).items():
            console.print(_outdated_table(group.capitalize(), rows))
    else:
        console.print(_outdated_table("Outdated", list(outdated.items())))


def print_scan_summary(rows: list[dict[str, Any]]) -> None:
    """Print one row per project with its outdated status."""
    if not rows:
        console.print("[dim]No projects found.[/dim]")
        return
    table = Table(title="depsonar Scan", show_header=True, header_style="bold")
    table.add_column("Project", style="bold")
    table.add_column("Language")
    table.add_column("Framework")
    table.add_column("PM")
    table.add_column("Status")
    total = 0
    for row in rows:
        total += row["outdatedCount"]
        if row["outdatedCount"] == 0:
            status = Text("up to date", style="green")
        else:
            suffix = " (major)" if row["hasMajor"] else ""
            status = Text(f"{row['outdatedCount']} outdated{suffix}", style="yellow")
        framework = row["framework"]
        if row.get("frameworkVersion"):
            framework = f"{framework} {row['frameworkVersion']}"
        table.add_row(row["name"], row["languageName"], framework, row["packageManager"], status)
    console.print(table)
    up_to_date = sum(1 for r in rows if r["outdatedCount"] == 0)
    console.print(
        f"  {len(rows)} projects, {up_to_date} up to date, {total} outdated packages total"
    )


def print_health_report(report: HealthReport) -> None:
    """Print a health report with score and recommendations."""
    score = Text(f"{report.score}/100", style=score_style(report.score))
    console.print(Panel(Text.assemble(("Score: ", "bold"), score), title=f"Health: {report.project}"))
    framework = report.framework
    if report.framework_version:
        framework = f"{framework} ({report.framework_version})"
    table = Table(show_header=False)
    table.add_column("Signal", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Framework", framework)
    table.add_row("Package manager", report.package_manager)
    table.add_row("Lockfile", "yes" if report.lockfile_exists else "missing")
    table.add_row("Outdated", str(report.outdated_count))
    table.add_row("Major updates", str(report.major_updates))
    table.add_row("Security issues", str(report.security_issues))
    console.print(table)
    for rec in report.recommendations:
        console.print(f"  - {rec}")


def print_cache_alerts(cache: CacheFile) -> None:
    """Print projects from the cache that need attention."""
    needing = [p for p in cache.projects if p.outdated_count > 0]
    console.print(f"[dim]Last scan: {cache.updated_at}[/dim]")
    if not needing:
        console.print(f"[green]All {len(cache.projects)} projects are up to date.[/green]")
        return
    table = Table(title="Dependency Alerts", show_header=True, header_style="bold")
    table.add_column("Project", style="bold")
    table.add_column("Outdated", justify="right")
    table.add_column("Major", justify="right")
    table.add_column("Score", justify="right")
    for entry in sorted(needing, key=lambda e: e.score):
        table.add_row(
            entry.project, str(entry.outdated_count), str(entry.major_count),
            Text(str(entry.score), style=score_style(entry.score)),
        )
    console.print(table)


def print_batch_results(results: list[dict[str, Any]], dry_run: bool) -> None:
    """Print the outcome of ``update-all``."""
    title = "Update Preview" if dry_run else "Update Results"
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Project", style="bold")
    table.add_column("Command" if dry_run else "Updated")
    table.add_column("Remaining", justify="right")
    for r in results:
        if r.get("error"):
            table.add_row(r["name"], Text(r["error"], style="red"), str(r["remaining"]))
        elif dry_run:
            table.add_row(r["name"], r.get("command", ""), str(r["remaining"]))
        else:
            table.add_row(r["name"], str(r["updated"]), str(r["remaining"]))
    console.print(table)



def print_audit_results(results: list[AuditResult]) -> None:
    """Print per-project vulnerability counts, vulnerable projects first."""
    total = sum(r.vulnerabilities for r in results)
    if total == 0 and not any(r.error for r in results):
        console.print(
            f"[green]No known vulnerabilities in {len(results)} project(s).[/green]"
        )
        return
    table = Table(title="Security Audit", show_header=True, header_style="bold")
    table.add_column("Project", style="bold")
    table.add_column("Language")
    table.add_column("Vulnerabilities", justify="right")
    table.add_column("Note")
    for r in sorted(results, key=lambda r: -r.vulnerabilities):
        count = Text(str(r.vulnerabilities), style="bold red" if r.vulnerabilities else "green")
        note = Text(r.error or "", style="yellow")
        table.add_row(r.project, r.language, count, note)
    console.print(table)
    console.print(f"{len(results)} project(s) audited, {total} vulnerabilities found")
