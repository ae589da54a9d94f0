"""tinytl CLI Main Entry Point

Usage:
    tinytl render page.ttl -c context.yaml      # Render to stdout
    tinytl render page.ttl -s name=arthur       # Inline context values
    tinytl render page.ttl -c ctx.yaml -o out   # Render to file
    tinytl debug page.ttl                       # Print canonical template
    tinytl json context.yaml                    # Print context as JSON
    tinytl -V                                   # Show version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from tinytl._version import __version__
from tinytl.engine.exporter import to_json
from tinytl.template import Template

from .utils import handle_error, load_context, resolve_config, setup_logging

log = logging.getLogger(__name__)

typer_app = typer.Typer(
    help="Tiny Template Language - render templates against YAML contexts.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"tinytl {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main(
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output."),
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    setup_logging(verbose)


@typer_app.command("render")
def render_command(
    template: Path = typer.Argument(..., help="Template file to render."),
    context: Optional[Path] = typer.Option(
        None, "-c", "--context", help="YAML or JSON file holding the context."
    ),
    assignments: Optional[List[str]] = typer.Option(
        None, "-s", "--set", help="Context value as dotted.key=value (repeatable)."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="YAML file with engine settings."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write the result to a file instead of stdout."
    ),
) -> None:
    """Render TEMPLATE against a context."""
    try:
        tmpl = Template.from_file(template, resolve_config(config))
        ctx = load_context(context, assignments or [])
        result = tmpl.render(ctx)
    except Exception as exc:
        handle_error(exc)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
        log.info("Wrote %d chars to %s", len(result), output)
    else:
        typer.echo(result, nl=False)


@typer_app.command("debug")
def debug_command(
    template: Path = typer.Argument(..., help="Template file to print."),
) -> None:
    """Print the canonical form of TEMPLATE."""
    try:
        text = Template.from_file(template).debug()
    except Exception as exc:
        handle_error(exc)

    typer.echo(text)


@typer_app.command("json")
def json_command(
    context: Path = typer.Argument(..., help="YAML or JSON context file."),
) -> None:
    """Print CONTEXT as compact JSON."""
    try:
        text = to_json(load_context(context))
    except Exception as exc:
        handle_error(exc)

    typer.echo(text)


def app() -> None:
    """Entry point for the `tinytl` console script."""
    typer_app()


if __name__ == "__main__":
    app()
