#!/usr/bin/env python3
import logging
import sys
from typing import Optional

import typer

from . import __version__
from .automation_api.query_builder import UnknownBackendError, available_backends
from .commands.diagnostics_command import handle_diagnostics
from .commands.query_command import handle_query, handle_script
from .commands.render_command import handle_render
from .utils.config import load_env_vars
from .utils.logger import configure_logging

app = typer.Typer(
    name="taskblock",
    help="taskblock - Render markdown task blocks from Things3 and OmniFocus.",
    no_args_is_help=True,
)

BACKEND_HELP = f"Task manager to query ({', '.join(available_backends())}). Defaults to $TASKBLOCK_BACKEND or things."


def _version_callback(value: bool):
    if value:
        print(f"taskblock {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output, including raw JXA results."),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
):
    """taskblock - Render markdown task blocks from Things3 and OmniFocus."""
    load_env_vars()
    configure_logging(logging.DEBUG if verbose else logging.INFO)


def _run(handler, args) -> None:
    try:
        code = handler(args)
    except UnknownBackendError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=1)
    if code:
        raise typer.Exit(code=code)


@app.command("render")
def render(
    file: str = typer.Argument(..., help="Markdown file containing ```things / ```omnifocus blocks."),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="Only render blocks for this task manager."),
    html: Optional[str] = typer.Option(None, "--html", help="Write the document with blocks rendered as HTML to this path."),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Offer to reload each block after it is shown."),
):
    """Render every task block in a markdown file."""
    args = type('Args', (), {
        'file': file,
        'backend': backend,
        'html': html,
        'interactive': interactive,
    })
    _run(handle_render, args)


@app.command("query")
def query(
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    item_type: Optional[str] = typer.Option(None, "--type", "-t", help="task (default) or project."),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma-separated tags; items with any of them match."),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Exact project name (tasks only)."),
    area: Optional[str] = typer.Option(None, "--area", "-a", help="Comma-separated area / folder names."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="File with block text, or - for stdin."),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format."),
    interactive: bool = typer.Option(False, "--interactive", "-i", help="Offer to reload after the table is shown."),
):
    """Query open items from a task manager, like a single block would."""
    args = type('Args', (), {
        'backend': backend,
        'type': item_type,
        'tags': tags,
        'project': project,
        'area': area,
        'config': config,
        'json': json_output,
        'interactive': interactive,
    })
    _run(handle_query, args)


@app.command("script")
def script(
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help=BACKEND_HELP),
    item_type: Optional[str] = typer.Option(None, "--type", "-t", help="task (default) or project."),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma-separated tags."),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Exact project name."),
    area: Optional[str] = typer.Option(None, "--area", "-a", help="Comma-separated area / folder names."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="File with block text, or - for stdin."),
):
    """Print the JXA program a block would run, without running it."""
    args = type('Args', (), {
        'backend': backend,
        'type': item_type,
        'tags': tags,
        'project': project,
        'area': area,
        'config': config,
    })
    _run(handle_script, args)


@app.command("diagnostics")
def diagnostics():
    """Health check - platform, osascript, task managers running."""
    code = handle_diagnostics()
    if code:
        raise typer.Exit(code=code)


if __name__ == "__main__":
    app()
