"""Data models shared by the classifier, resolver, scorer, and cache.

These are pure data holders with no business logic, so that the CLI, the
background checker, and the ecosystem implementations can import them
without pulling in each other.

The cache file and JSON reports use camelCase keys (``outdatedCount``,
``checkedAt``) so that cache files written by earlier releases stay
readable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class UpdateLevel(str, Enum):
    """Safety level controlling how aggressive an update command is."""

    PATCH = "patch"
    MINOR = "minor"
    LATEST = "latest"


class UpdateKind(str, Enum):
    """Which version component an available update changes."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    UNKNOWN = "unknown"


class OutdatedStatus(str, Enum):
    """Why an outdated lookup produced the packages it did.

    ``OK`` means the tool ran and its output parsed, so an empty mapping is
    a confirmed "up to date". The other statuses mean "could not determine".
    """

    OK = "ok"
    TOOL_ABSENT = "tool_absent"
    TOOL_FAILED = "tool_failed"
    PARSE_FAILED = "parse_failed"


# ---------------------------------------------------------------------------
# Outdated packages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OutdatedPackage:
    """One package with a newer version available.

    Attributes:
        current: Installed version in the ecosystem's native format.
        wanted: Highest version satisfying the declared constraint. Equal to
            ``latest`` for ecosystems without that distinction.
        latest: Highest published version, ignoring constraints.
        type: Optional dependency-type tag (e.g. "devDependencies").
    """

    current: str
    wanted: str
    latest: str
    type: str | None = None


@dataclass
class OutdatedResult:
    """Outcome of one outdated lookup.

    Attributes:
        packages: Package name to ``OutdatedPackage``, in tool output order.
        status: ``OutdatedStatus`` describing how the lookup ended.
        reason: Human-readable detail for non-OK statuses.
    """

    packages: dict[str, OutdatedPackage] = field(default_factory=dict)
    status: OutdatedStatus = OutdatedStatus.OK
    reason: str = ""

    @property
    def ok(self) -> bool:
        """True when the result reflects a successful tool run."""
        return self.status is OutdatedStatus.OK

    def __len__(self) -> int:
        return len(self.packages)

    @classmethod
    def absent(cls, tool: str) -> OutdatedResult:
        return cls(status=OutdatedStatus.TOOL_ABSENT, reason=f"{tool} is not installed")

    @classmethod
    def failed(cls, reason: str) -> OutdatedResult:
        return cls(status=OutdatedStatus.TOOL_FAILED, reason=reason)

    @classmethod
    def unparseable(cls, reason: str) -> OutdatedResult:
        return cls(status=OutdatedStatus.PARSE_FAILED, reason=reason)


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ManifestData:
    """Enrichment fields read from an ecosystem's manifest file.

    Every field is optional: a missing or malformed manifest yields the
    defaults, never an error.
    """

    name: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    runtime_version: str | None = None


@dataclass(frozen=True)
class ProjectInfo:
    """A directory classified as a project of one ecosystem.

    Attributes:
        name: Display name from the manifest, else the directory basename.
        path: Absolute path to the project directory.
        language: Ecosystem key (e.g. "node", "rust").
        framework: Detected framework, or the ecosystem display name.
        package_manager: Node package manager ("npm", "pnpm", "yarn",
            "bun"). Always "npm" for other ecosystems.
        runtime_version: Declared runtime constraint (``engines.node``).
        dependencies: Declared direct dependencies.
        dev_dependencies: Declared development dependencies.
    """

    name: str
    path: str
    language: str
    framework: str
    package_manager: str = "npm"
    runtime_version: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def all_dependencies(self) -> dict[str, str]:
        """Direct and dev dependencies merged, dev entries winning."""
        return {**self.dependencies, **self.dev_dependencies}


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@dataclass
class HealthReport:
    """Point-in-time health summary of one project."""

    project: str
    language: str
    framework: str
    framework_version: str | None
    runtime_version: str | None
    package_manager: str
    lockfile_exists: bool
    outdated_count: int
    major_updates: int
    security_issues: int
    score: int
    recommendations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "language": self.language,
            "framework": self.framework,
            "frameworkVersion": self.framework_version,
            "nodeVersion": self.runtime_version,
            "packageManager": self.package_manager,
            "lockfileExists": self.lockfile_exists,
            "outdatedCount": self.outdated_count,
            "majorUpdates": self.major_updates,
            "securityIssues": self.security_issues,
            "score": self.score,
            "recommendations": list(self.recommendations),
        }


@dataclass
class AuditResult:
    """Vulnerability count reported by one project's audit tool.

    ``error`` is set when the count could not be obtained (no audit tool
    for the ecosystem, tool not installed, tool failed, output not
    understood); ``vulnerabilities`` is then 0.
    """

    project: str
    language: str
    command: str | None
    vulnerabilities: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "language": self.language,
            "command": self.command,
            "vulnerabilities": self.vulnerabilities,
            "error": self.error,
        }


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


@dataclass
class CacheEntry:
    """Summary of one project as persisted by the background checker."""

    project: str
    path: str
    language: str
    framework: str
    outdated_count: int
    major_count: int
    security_issues: int
    score: int
    checked_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "path": self.path,
            "language": self.language,
            "framework": self.framework,
            "outdatedCount": self.outdated_count,
            "majorCount": self.major_count,
            "securityIssues": self.security_issues,
            "score": self.score,
            "checkedAt": self.checked_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheEntry:
        return cls(
            project=str(data["project"]),
            path=str(data.get("path", "")),
            language=str(data.get("language", "")),
            framework=str(data.get("framework", "")),
            outdated_count=int(data.get("outdatedCount", 0)),
            major_count=int(data.get("majorCount", 0)),
            security_issues=int(data.get("securityIssues", 0)),
            score=int(data.get("score", 0)),
            checked_at=str(data.get("checkedAt", "")),
        )


@dataclass
class CacheFile:
    """The full cache document: format version, timestamp, entries."""

    version: str
    updated_at: str
    projects: list[CacheEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "updatedAt": self.updated_at,
            "projects": [p.to_dict() for p in self.projects],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CacheFile:
        return cls(
            version=str(data.get("version", "")),
            updated_at=str(data.get("updatedAt", "")),
            projects=[CacheEntry.from_dict(p) for p in data.get("projects", [])],
        )
