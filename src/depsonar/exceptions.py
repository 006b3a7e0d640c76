"""depsonar exception hierarchy.

All public exceptions inherit from DepsonarError, giving callers a single
base class to catch when they want to handle any depsonar-specific failure
without swallowing unrelated errors.

Most failures inside the core never surface as exceptions at all: a missing
tool, a failing tool, or unparseable output degrade to an empty result for
that one project. The classes below cover the conditions that do propagate.
"""

from __future__ import annotations


class DepsonarError(Exception):
    """Base exception for all depsonar errors."""


class CommandError(DepsonarError):
    """Raised when an external command fails without producing output.

    Covers non-zero exits with empty stdout, timeouts, and commands that
    cannot be spawned at all.

    Attributes:
        command: The shell command that was executed.
        returncode: Process exit status, or None on timeout/spawn failure.
    """

    def __init__(self, command: str, message: str, returncode: int | None = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(f"Command failed: {command}\n{message}".rstrip())


class ConfigError(DepsonarError):
    """Raised when the configuration file cannot be written."""


class ProjectNotFoundError(DepsonarError):
    """Raised when a project name or path does not resolve to a project."""


class ScanInProgressError(DepsonarError):
    """Raised when a batch scan is requested while another is running."""
