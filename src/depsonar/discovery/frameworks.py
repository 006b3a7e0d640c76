"""Framework detection by config file and by declared dependency.

Detection is two ordered searches:

1. **Config files** -- each framework in ``FRAMEWORK_DETECTORS`` lists the
   filenames its projects carry at the root. Entries of the form ``*.ext``
   match any directory entry with that suffix (an Xcode project is a
   directory named ``App.xcodeproj``).
2. **Node dependencies** -- for Node projects only, the merged direct and
   dev dependency maps are checked against ``NODE_DEPENDENCY_FRAMEWORKS``.
   Meta-frameworks come before the UI library they build on, so a project
   depending on both ``@sveltejs/kit`` and ``svelte`` is SvelteKit.

If neither search matches, the ecosystem's display name stands in.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depsonar.core.models import ProjectInfo

logger = logging.getLogger(__name__)

UNKNOWN_FRAMEWORK = "Unknown"

# Framework -> root-level config filenames. Order matters.
FRAMEWORK_DETECTORS: dict[str, tuple[str, ...]] = {
    "SvelteKit": ("svelte.config.js", "svelte.config.ts"),
    "Next.js": ("next.config.js", "next.config.ts", "next.config.mjs"),
    "Nuxt": ("nuxt.config.ts", "nuxt.config.js"),
    "Astro": ("astro.config.mjs", "astro.config.ts"),
    "Remix": ("remix.config.js", "remix.config.ts"),
    "SolidStart": ("app.config.ts", "app.config.js"),
    "Django": ("manage.py",),
    "Flask": ("wsgi.py",),
    "Laravel": ("artisan",),
    "Xcode/Swift": ("*.xcodeproj", "*.xcworkspace"),
    "Android/Kotlin": ("settings.gradle.kts", "settings.gradle"),
}

# (dependency name, framework), specific before generic.
NODE_DEPENDENCY_FRAMEWORKS: tuple[tuple[str, str], ...] = (
    ("solid-start", "SolidStart"),
    ("solid-js", "Solid.js"),
    ("@sveltejs/kit", "SvelteKit"),
    ("svelte", "Svelte"),
    ("next", "Next.js"),
    ("react", "React"),
    ("vue", "Vue"),
    ("express", "Express"),
    ("fastify", "Fastify"),
    ("hono", "Hono"),
)

# Framework -> dependency names to read its declared version from.
FRAMEWORK_VERSION_SOURCES: dict[str, tuple[str, ...]] = {
    "SvelteKit": ("@sveltejs/kit", "svelte"),
    "Svelte": ("svelte",),
    "Next.js": ("next",),
    "React": ("react",),
    "Nuxt": ("nuxt",),
    "Vue": ("vue",),
    "Astro": ("astro",),
    "SolidStart": ("solid-start", "solid-js"),
    "Solid.js": ("solid-js",),
}


def _has_config(path: Path, pattern: str) -> bool:
    if pattern.startswith("*."):
        suffix = pattern[1:]
        try:
            return any(entry.name.endswith(suffix) for entry in path.iterdir())
        except OSError:
            return False
    return (path / pattern).exists()


def detect_framework_by_config(path: Path) -> str | None:
    """Return the first framework whose config file exists in ``path``."""
    for framework, patterns in FRAMEWORK_DETECTORS.items():
        if any(_has_config(path, p) for p in patterns):
            return framework
    return None


def detect_framework_by_dependencies(dependencies: dict[str, str]) -> str | None:
    """Return the first framework whose package is declared."""
    for package, framework in NODE_DEPENDENCY_FRAMEWORKS:
        if dependencies.get(package):
            return framework
    return None


def detect_framework(
    path: Path,
    language: str,
    dependencies: dict[str, str],
    fallback: str = UNKNOWN_FRAMEWORK,
) -> str:
    """Detect a project's framework.

    Args:
        path: Project directory.
        language: Ecosystem key. Dependency sniffing applies to "node" only.
        dependencies: Merged direct and dev dependencies.
        fallback: Returned when nothing matches, normally the ecosystem
            display name.

    Returns:
        The framework name.
    """
    framework = detect_framework_by_config(path)
    if framework is None and language == "node":
        framework = detect_framework_by_dependencies(dependencies)
    return framework or fallback


def get_framework_version(info: ProjectInfo) -> str | None:
    """Return the declared version range of the project's framework.

    Args:
        info: A classified project.

    Returns:
        The range string from the manifest (e.g. "^2.5.0"), or None if the
        framework has no known package or it is not declared.
    """
    deps = info.all_dependencies
    for package in FRAMEWORK_VERSION_SOURCES.get(info.framework, ()):
        if deps.get(package):
            return deps[package]
    return None
