"""Project discovery: ecosystem, package manager, and framework detection.

Public API::

    from depsonar.discovery import ProjectClassifier, ProjectScanner

    info = ProjectClassifier().classify(Path("./my-app"))
    projects = ProjectScanner().discover(Path("~/Projects").expanduser())
"""

from __future__ import annotations

from depsonar.discovery.classifier import ProjectClassifier, detect_package_manager
from depsonar.discovery.frameworks import detect_framework, get_framework_version
from depsonar.discovery.scanner import ProjectScanner

__all__ = [
    "ProjectClassifier",
    "ProjectScanner",
    "detect_framework",
    "detect_package_manager",
    "get_framework_version",
]
