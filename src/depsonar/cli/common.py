"""Shared helpers for CLI commands: engine construction and error display."""

from __future__ import annotations

import functools
import json
import sys
from collections.abc import Callable
from typing import Any, TypeVar

import click

from depsonar.config import load_config
from depsonar.core.engine import DepsonarEngine
from depsonar.exceptions import DepsonarError

F = TypeVar("F", bound=Callable[..., Any])


def build_engine() -> DepsonarEngine:
    """Create an engine bound to the user's configuration."""
    return DepsonarEngine(config=load_config())


def handle_errors(func: F) -> F:
    """Render ``DepsonarError`` as a one-line message with exit code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DepsonarError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    return wrapper  # type: ignore[return-value]


LEVEL_CHOICE = click.Choice(["patch", "minor", "latest"], case_sensitive=False)


def echo_json(data: Any) -> None:
    """Write ``data`` to stdout as indented JSON."""
    click.echo(json.dumps(data, indent=2, default=str))
