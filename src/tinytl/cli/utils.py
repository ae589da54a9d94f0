"""Shared utilities for CLI commands"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional, Sequence

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler

from tinytl.config import EngineConfig, load_config
from tinytl.errors import TemplateError
from tinytl.values import Map, to_context

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the tinytl CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (TINYTL_DEBUG=1): DEBUG level - parse and render milestones
    """
    debug = bool(os.environ.get("TINYTL_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("tinytl")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.echo(f"Error: {message}", err=True)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Report a template, config or file error and exit."""
    if isinstance(error, TemplateError):
        exit_with_error(str(error))
    elif isinstance(error, (OSError, ValueError, yaml.YAMLError)):
        exit_with_error(str(error))
    else:
        typer.echo(f"Unexpected error: {error}", err=True)
        sys.exit(1)


def stringify(data: Any) -> Any:
    """Turn YAML scalars into strings, keeping lists and mappings.

    The template value model only knows strings, so `true` becomes
    "true", numbers go through `str` and null becomes "".
    """
    if isinstance(data, dict):
        return {str(k): stringify(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [stringify(v) for v in data]
    if data is None:
        return ""
    if isinstance(data, bool):
        return "true" if data else "false"
    return str(data)


def apply_assignment(data: dict[str, Any], assignment: str) -> None:
    """Apply a `dotted.key=value` assignment to nested dict data."""
    key, sep, value = assignment.partition("=")
    if not sep or not key:
        raise ValueError(f"Invalid assignment (expected key=value): {assignment}")

    *parents, leaf = key.split(".")
    target = data
    for part in parents:
        child = target.get(part)
        if not isinstance(child, dict):
            child = {}
            target[part] = child
        target = child
    target[leaf] = value


def load_context(path: Optional[Path], assignments: Sequence[str] = ()) -> Map:
    """Build a context from a YAML (or JSON) file plus key=value assignments."""
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise FileNotFoundError(f"Context file not found: {path}")
        with open(path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(
                f"Context file must be a mapping at the top level: {path}"
            )
        data = stringify(loaded or {})

    for assignment in assignments:
        apply_assignment(data, assignment)

    return to_context(data)


def resolve_config(path: Optional[Path]) -> EngineConfig:
    if path is None:
        return EngineConfig()
    return load_config(path)
