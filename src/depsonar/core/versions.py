"""Heuristic version comparison for outdated packages.

Ecosystem version strings are not uniformly semver: npm reports ranges such
as ``^1.4.0``, Go uses ``v2.1.0``, Ruby and Python have their own schemes.
Rather than parse each grammar, the comparator strips any leading non-digit
characters and compares dot-separated numeric tokens as strings.

Limitation: a version without a numeric-first, dot-delimited component is
never flagged as a major update. This under-reports for some non-semver
tags and is accepted as-is.
"""

from __future__ import annotations

import re

from depsonar.core.models import UpdateKind

_LEADING_NON_DIGITS = re.compile(r"^[^0-9]*")
_NUMERIC_PREFIX = re.compile(r"^\d+")


def _strip_prefix(version: str) -> str:
    return _LEADING_NON_DIGITS.sub("", version)


def major_token(version: str) -> str:
    """Return the token before the first dot, after stripping prefixes.

    Args:
        version: A version string such as "v2.1.0" or "^1.4".

    Returns:
        The major token (e.g. "2"), or "" when there are no digits.
    """
    return _strip_prefix(version).split(".")[0]


def is_major_update(current: str, latest: str) -> bool:
    """Return True if going from ``current`` to ``latest`` crosses a major.

    Returns False when either side has no extractable major token.
    """
    cur = major_token(current)
    lat = major_token(latest)
    return cur != lat and cur != "" and lat != ""


def _components(version: str) -> list[str]:
    parts = []
    for token in _strip_prefix(version).split(".")[:3]:
        match = _NUMERIC_PREFIX.match(token)
        parts.append(match.group(0) if match else token)
    while len(parts) < 3:
        parts.append("0")
    return parts


def classify_update(current: str, latest: str) -> UpdateKind:
    """Classify an update as major, minor, or patch.

    Uses the same prefix-stripping as ``is_major_update``, then compares the
    second and third components.

    Args:
        current: Installed version.
        latest: Candidate version.

    Returns:
        ``UpdateKind.UNKNOWN`` when either major token is missing,
        ``UpdateKind.MAJOR`` when the major token changes, otherwise
        ``MINOR`` or ``PATCH`` by the first differing component.
    """
    if major_token(current) == "" or major_token(latest) == "":
        return UpdateKind.UNKNOWN
    if is_major_update(current, latest):
        return UpdateKind.MAJOR
    cur = _components(current)
    lat = _components(latest)
    if cur[1] != lat[1]:
        return UpdateKind.MINOR
    return UpdateKind.PATCH
