"""Project health scoring and recommendations.

The score starts at 100 and loses points per signal:

=====================  ==============  =========
Signal                 Penalty         Cap
=====================  ==============  =========
outdated package       3 each          40
major update           10 each         none
no lockfile            15 flat         --
security issue         5 each          30
=====================  ==============  =========

The result is clamped to [0, 100]. Recommendations come from independent
threshold checks in a fixed order; the all-clear message appears only when
the score is exactly 100.

The security-issue count comes from the ecosystem's audit tool.
``parse_audit_count`` understands the npm/pnpm ``metadata.vulnerabilities``
summary as well as pip-audit, cargo-audit, and composer audit output. Any
other shape counts as zero.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from depsonar.core.models import OutdatedPackage
from depsonar.core.versions import is_major_update

MAX_SCORE = 100
OUTDATED_PENALTY = 3
OUTDATED_PENALTY_CAP = 40
MAJOR_PENALTY = 10
MISSING_LOCKFILE_PENALTY = 15
SECURITY_PENALTY = 5
SECURITY_PENALTY_CAP = 30
MANY_OUTDATED_THRESHOLD = 10

# Lockfiles of all nine ecosystems.
LOCKFILES: tuple[str, ...] = (
    "pnpm-lock.yaml",
    "package-lock.json",
    "yarn.lock",
    "bun.lockb",
    "bun.lock",
    "Cargo.lock",
    "go.sum",
    "composer.lock",
    "Gemfile.lock",
    "pubspec.lock",
    "Pipfile.lock",
    "Package.resolved",
    "gradle.lockfile",
)


def has_lockfile(path: Path | str) -> bool:
    """Return True if any recognized lockfile exists in ``path``."""
    directory = Path(path)
    return any((directory / name).exists() for name in LOCKFILES)


def count_major_updates(outdated: dict[str, OutdatedPackage]) -> int:
    """Count packages whose latest version crosses a major boundary."""
    return sum(1 for pkg in outdated.values() if is_major_update(pkg.current, pkg.latest))


def compute_score(
    outdated_count: int,
    major_count: int,
    lockfile_exists: bool = True,
    security_issues: int = 0,
) -> int:
    """Compute the bounded health score.

    Args:
        outdated_count: Number of outdated packages.
        major_count: Number of those that are major updates.
        lockfile_exists: Whether a lockfile is present.
        security_issues: Vulnerabilities reported by the audit tool.

    Returns:
        An integer in [0, 100].
    """
    score = MAX_SCORE
    score -= min(outdated_count * OUTDATED_PENALTY, OUTDATED_PENALTY_CAP)
    score -= major_count * MAJOR_PENALTY
    if not lockfile_exists:
        score -= MISSING_LOCKFILE_PENALTY
    score -= min(security_issues * SECURITY_PENALTY, SECURITY_PENALTY_CAP)
    return max(0, min(MAX_SCORE, score))


def compute_quick_score(outdated_count: int, major_count: int) -> int:
    """Score without the lockfile and audit deductions, as the checker caches it."""
    return compute_score(outdated_count, major_count)


def build_recommendations(
    score: int,
    outdated_count: int,
    major_count: int,
    lockfile_exists: bool,
    security_issues: int,
) -> list[str]:
    """Generate human-readable recommendations for a health report."""
    recommendations: list[str] = []
    if not lockfile_exists:
        recommendations.append("Missing lockfile. Run install to generate one.")
    if major_count > 0:
        recommendations.append(
            f"{major_count} major update(s). Review changelogs before updating."
        )
    if security_issues > 0:
        recommendations.append(f"{security_issues} security issue(s). Run audit fix.")
    if outdated_count > MANY_OUTDATED_THRESHOLD:
        recommendations.append("Many outdated packages. Start with minor/patch updates.")
    if score == MAX_SCORE:
        recommendations.append("All good! Dependencies are up to date.")
    return recommendations


def _int(value: Any) -> int:
    return value if isinstance(value, int) else 0


def parse_audit_count(raw: str) -> int:
    """Extract a vulnerability count from audit tool JSON.

    Args:
        raw: Audit command stdout.

    Returns:
        The number of reported vulnerabilities. Zero for unrecognized shapes.

    Raises:
        ValueError: If ``raw`` is not JSON.
    """
    parsed = json.loads(raw)
    if not isinstance(parsed, dict):
        return 0

    # npm / pnpm / yarn classic summary
    metadata = parsed.get("metadata")
    if isinstance(metadata, dict) and isinstance(metadata.get("vulnerabilities"), dict):
        v = metadata["vulnerabilities"]
        return _int(v.get("high")) + _int(v.get("critical")) + _int(v.get("moderate"))

    # cargo audit
    vulnerabilities = parsed.get("vulnerabilities")
    if isinstance(vulnerabilities, dict) and "count" in vulnerabilities:
        return _int(vulnerabilities["count"])

    # pip-audit
    dependencies = parsed.get("dependencies")
    if isinstance(dependencies, list):
        return sum(
            len(dep.get("vulns") or [])
            for dep in dependencies
            if isinstance(dep, dict)
        )

    # composer audit
    advisories = parsed.get("advisories")
    if isinstance(advisories, dict):
        return sum(len(items) for items in advisories.values() if isinstance(items, list))

    return 0
