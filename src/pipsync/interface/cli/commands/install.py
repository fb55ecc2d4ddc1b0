"""
Install Commands - Synchronizing PIP files into the database

install / uninstall / plugins
"""

import logging

import typer

from pipsync.application.container import Container
from pipsync.interface.cli.commands import command_errors
from pipsync.interface.cli.formatters.result_formatters import InstallResultFormatter, console

logger = logging.getLogger(__name__)
formatter = InstallResultFormatter()


def install(ctx: typer.Context):
    """Apply the managed PIP files to the database."""
    container: Container = ctx.obj
    with command_errors("install"):
        count = container.sync_service.install()
        console.print(
            f"[green]✅ {container.package.package}: {count} plugin(s) installed[/green]"
        )


def uninstall(ctx: typer.Context):
    """Remove every plugin row owned by the package."""
    container: Container = ctx.obj
    with command_errors("uninstall"):
        container.sync_service.uninstall()
        console.print(f"[green]✅ {container.package.package}: plugins removed[/green]")


def list_plugins(ctx: typer.Context):
    """Show the plugin rows the package has installed and the known plugin types."""
    container: Container = ctx.obj
    with command_errors("plugins"):
        formatter.display_plugins(
            container.sync_service.installed_plugins(), container.package.package
        )
        formatter.display_registry(container.registry)
