"""
Entry Commands - Editing PIP files

list / show / add / edit / delete / sort
"""

import logging
from typing import Optional

import typer

from pipsync.application.container import Container
from pipsync.interface.cli.commands import command_errors
from pipsync.interface.cli.formatters.result_formatters import EntryListFormatter, console

logger = logging.getLogger(__name__)
formatter = EntryListFormatter()


def list_entries(ctx: typer.Context):
    """List the entries of all managed PIP files."""
    container: Container = ctx.obj
    with command_errors("list"):
        formatter.display_entry_list(container.sync_service.list_entries())


def show_entry(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Plugin name of the entry."),
):
    """Show the stored values of one entry."""
    container: Container = ctx.obj
    with command_errors("show"):
        formatter.display_entry(identifier, container.sync_service.show_entry(identifier))


def add_entry(
    ctx: typer.Context,
    plugin_name: str = typer.Argument(..., help="Plugin name, e.g. templateListener."),
    class_name: str = typer.Argument(..., help="Fully-qualified plugin class name."),
):
    """Add an entry to every managed PIP file and register it."""
    container: Container = ctx.obj
    with command_errors("add"):
        identifier = container.sync_service.add_entry(
            {"pluginName": plugin_name, "className": class_name}
        )
        console.print(f"[green]✅ Entry '{identifier}' added[/green]")


def edit_entry(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Plugin name of the entry to edit."),
    plugin_name: Optional[str] = typer.Option(None, "--name", help="New plugin name."),
    class_name: Optional[str] = typer.Option(None, "--class", help="New class name."),
):
    """Edit an entry in place; unchanged fields keep their values."""
    container: Container = ctx.obj
    with command_errors("edit"):
        result = container.sync_service.edit_entry(
            identifier, {"pluginName": plugin_name, "className": class_name}
        )
        formatter.display_edit_result(result)


def delete_entry(
    ctx: typer.Context,
    identifier: str = typer.Argument(..., help="Plugin name of the entry to delete."),
    add_delete_instruction: bool = typer.Option(
        False,
        "--add-delete-instruction",
        help="Also record the removal in the <delete> section.",
    ),
):
    """Delete an entry from every managed PIP file."""
    container: Container = ctx.obj
    with command_errors("delete"):
        container.sync_service.delete_entry(identifier, add_delete_instruction)
        console.print(f"[green]✅ Entry '{identifier}' deleted[/green]")


def sort_files(ctx: typer.Context):
    """Normalize the order of all managed PIP files."""
    container: Container = ctx.obj
    with command_errors("sort"):
        for path in container.sync_service.sort_documents():
            console.print(f"[green]✓[/green] {path}")
