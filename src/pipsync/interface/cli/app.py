"""
CLI Orchestrator - Main Entry Point

Wires the entry and install commands into one typer application and sets up
configuration and logging for every invocation.
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from pipsync.application.container import Container
from pipsync.infrastructure.logging_config import setup_logging
from pipsync.interface.cli.commands import command_errors
from pipsync.interface.cli.commands.entries import (
    add_entry,
    delete_entry,
    edit_entry,
    list_entries,
    show_entry,
    sort_files,
)
from pipsync.interface.cli.commands.install import install, list_plugins, uninstall

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pipsync",
    help="📦 Package installation plugin XML synchronization",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

app.command("list")(list_entries)
app.command("show")(show_entry)
app.command("add")(add_entry)
app.command("edit")(edit_entry)
app.command("delete")(delete_entry)
app.command("sort")(sort_files)
app.command("install")(install)
app.command("uninstall")(uninstall)
app.command("plugins")(list_plugins)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Path = typer.Option(
        Path("config"),
        "--config-dir",
        "-c",
        help="Directory containing sync_config.json.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging."),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to file."),
):
    """
    📦 pipsync - keep PIP files and installed state in step
    """
    container = Container(config_dir)
    with command_errors("config"):
        config = container.sync_config

    setup_logging(logging.DEBUG if verbose else config.log_level, log_file or config.log_file)
    ctx.obj = container
    ctx.call_on_close(container.close)


def main() -> None:
    app()
