"""External command execution behind an injectable interface.

Every call into a package manager, audit tool, or build tool goes through a
``CommandRunner``. The classifier, resolver, and scorer never import
``subprocess`` themselves, so tests can substitute a scripted runner and
exercise the full pipeline without spawning real processes.

``ShellRunner`` is the production implementation:

- Commands run through ``/bin/sh`` in the project directory.
- A fixed per-invocation timeout (120 seconds) applies.
- Color output is disabled (``FORCE_COLOR=0``, ``NO_COLOR=1``).
- A non-zero exit that still produced stdout is treated as success, since
  most "outdated" commands exit 1 precisely when something is outdated.
- A non-zero exit with empty stdout raises ``CommandError`` carrying the
  captured stderr.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from depsonar.exceptions import CommandError

logger = logging.getLogger(__name__)

# Timeout for a single external command (seconds).
COMMAND_TIMEOUT: float = 120.0


class CommandRunner(ABC):
    """Abstract capability for running commands and probing binaries."""

    @abstractmethod
    def run(self, command: str, cwd: Path | str) -> str:
        """Run ``command`` in ``cwd`` and return its stdout.

        Args:
            command: Shell command line.
            cwd: Working directory for the command.

        Returns:
            Captured stdout text.

        Raises:
            CommandError: On non-zero exit with empty stdout, or timeout.
        """

    @abstractmethod
    def exists(self, binary: str) -> bool:
        """Return True if ``binary`` can be found on PATH."""


class ShellRunner(CommandRunner):
    """Runs commands with ``subprocess`` through the system shell.

    Args:
        timeout: Per-invocation timeout in seconds.
    """

    def __init__(self, timeout: float = COMMAND_TIMEOUT) -> None:
        self.timeout = timeout

    def _env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["FORCE_COLOR"] = "0"
        env["NO_COLOR"] = "1"
        return env

    def run(self, command: str, cwd: Path | str) -> str:
        logger.debug("Running %r in %s", command, cwd)
        try:
            proc = subprocess.run(
                command,
                cwd=str(cwd),
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=self._env(),
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandError(command, f"Timed out after {exc.timeout:g}s") from exc
        except OSError as exc:
            raise CommandError(command, str(exc)) from exc

        if proc.returncode == 0 or proc.stdout:
            return proc.stdout
        message = proc.stderr.strip() or f"exit status {proc.returncode}"
        raise CommandError(command, message, returncode=proc.returncode)

    def exists(self, binary: str) -> bool:
        return shutil.which(binary) is not None
