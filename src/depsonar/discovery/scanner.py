"""Discover projects among the immediate subdirectories of a root.

Only one level is scanned: a projects directory is expected to hold one
project per child directory. Hidden directories and ``node_modules`` are
skipped. Results are sorted by display name, case-insensitively, so a batch
always processes projects in the same order.
"""

from __future__ import annotations

import logging
from pathlib import Path

from depsonar.core.models import ProjectInfo
from depsonar.discovery.classifier import ProjectClassifier

logger = logging.getLogger(__name__)

IGNORED_DIRS: frozenset[str] = frozenset({"node_modules"})


def _is_candidate(entry: Path) -> bool:
    if entry.name.startswith(".") or entry.name in IGNORED_DIRS:
        return False
    try:
        return entry.is_dir()
    except OSError:
        return False


class ProjectScanner:
    """Finds and classifies projects under a root directory.

    Usage::

        scanner = ProjectScanner()
        for info in scanner.discover(Path("~/Projects").expanduser()):
            print(info.name, info.language, info.framework)
    """

    def __init__(self, classifier: ProjectClassifier | None = None) -> None:
        self.classifier = classifier if classifier is not None else ProjectClassifier()

    def discover(self, root: Path | str) -> list[ProjectInfo]:
        """Classify every child directory of ``root``.

        Args:
            root: Directory whose children are candidate projects.

        Returns:
            Classified projects sorted by name. Empty if ``root`` does not
            exist.

        Raises:
            OSError: If ``root`` exists but cannot be listed.
        """
        root_dir = Path(root).expanduser()
        if not root_dir.is_dir():
            logger.debug("Projects directory %s does not exist", root_dir)
            return []

        projects: list[ProjectInfo] = []
        for entry in sorted(root_dir.iterdir()):
            if not _is_candidate(entry):
                continue
            info = self.classifier.classify(entry)
            if info is not None:
                projects.append(info)
        return sorted(projects, key=lambda p: p.name.lower())
