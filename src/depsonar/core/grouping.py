"""Partition outdated packages into display buckets.

Node projects tend to list dozens of outdated packages that belong to a
handful of families (a UI framework and its plugins, the lint toolchain,
the bundler). Grouping by family makes a report readable.

Patterns are tried in declaration order and the first match wins, so
``@types/react`` lands in ``react`` even though it also looks like typing
tooling. Names matching nothing go to ``other``.
"""

from __future__ import annotations

import re

from depsonar.core.models import OutdatedPackage

# Bucket name -> pattern over the package name. Order matters.
ECOSYSTEM_GROUPS: dict[str, re.Pattern[str]] = {
    "svelte": re.compile(r"^(svelte|@sveltejs/|svelte-check|svelte-preprocess)"),
    "react": re.compile(r"^(react|react-dom|@types/react|next|@next/)"),
    "vue": re.compile(r"^(vue|@vue/|nuxt|@nuxt/|vite-plugin-vue)"),
    "supabase": re.compile(r"^@supabase/"),
    "tailwind": re.compile(r"^(tailwindcss|@tailwindcss/|postcss|autoprefixer)"),
    "vite": re.compile(r"^(vite|@vitejs/|rollup|@rollup/)"),
    "typescript": re.compile(r"^(typescript|tslib|ts-node|@types/node)"),
    "eslint": re.compile(r"^(eslint|@eslint/|@typescript-eslint/|prettier)"),
    "stripe": re.compile(r"^(stripe|@stripe/)"),
    "testing": re.compile(r"^(vitest|@testing-library/|playwright|@playwright/)"),
}

OTHER_GROUP = "other"


def group_name(package: str) -> str:
    """Return the bucket a package name belongs to."""
    for name, pattern in ECOSYSTEM_GROUPS.items():
        if pattern.match(package):
            return name
    return OTHER_GROUP


def group_by_ecosystem(
    outdated: dict[str, OutdatedPackage],
) -> dict[str, list[tuple[str, OutdatedPackage]]]:
    """Group an outdated mapping into named buckets.

    Buckets appear in the order they are first populated, and entries keep
    the order of the input mapping.

    Args:
        outdated: Package name to ``OutdatedPackage``.

    Returns:
        Bucket name to ordered list of ``(name, package)`` pairs.
    """
    groups: dict[str, list[tuple[str, OutdatedPackage]]] = {}
    for name, info in outdated.items():
        groups.setdefault(group_name(name), []).append((name, info))
    return groups
