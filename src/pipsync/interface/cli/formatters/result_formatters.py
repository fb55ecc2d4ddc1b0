"""
CLI result formatters for entry lists, installed rows and errors.

Separates display logic from command logic.
"""

from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pipsync.application.entry_list import EntryList
from pipsync.domain.errors import FormValidationError
from pipsync.domain.models import EditResult, PluginRow
from pipsync.domain.registry import PluginRegistry

console = Console()


class EntryListFormatter:
    """Renders entry lists and single entries."""

    def display_entry_list(self, entry_list: EntryList, title: str = "PIP entries") -> None:
        table = Table(title=f"📋 {title}")
        table.add_column("Identifier", style="cyan", no_wrap=True)
        keys = entry_list.keys
        for label in keys.values():
            table.add_column(label)

        for entry in entry_list:
            table.add_row(entry.identifier, *(entry.fields.get(key, "") for key in keys))

        console.print(table)
        console.print(f"[blue]📊 {len(entry_list)} entr{'y' if len(entry_list) == 1 else 'ies'}[/blue]")

    def display_entry(self, identifier: str, fields: dict) -> None:
        console.print(f"[bold]{identifier}[/bold]")
        for key, value in fields.items():
            console.print(f"  {key}: {escape(str(value))}")

    def display_edit_result(self, result: EditResult) -> None:
        console.print(f"[green]✅ Entry saved as '{result.identifier}'[/green]")
        if result.partial:
            console.print(
                "[yellow]⚠️ The entry was missing from some PIP files; only "
                f"{len(result.documents)} file(s) were changed[/yellow]"
            )


class InstallResultFormatter:
    """Renders the installed plugin rows of a package."""

    def display_plugins(self, rows: List[PluginRow], package: str) -> None:
        table = Table(title=f"🗄️ Installed plugins of {package}")
        table.add_column("Plugin Name", style="cyan", no_wrap=True)
        table.add_column("Class Name")
        table.add_column("Priority", justify="right")
        for row in rows:
            table.add_row(row.plugin_name, row.class_name, str(row.priority))
        console.print(table)

    def display_registry(self, registry: PluginRegistry) -> None:
        table = Table(title="🧩 Known plugin types")
        table.add_column("Class Name", style="cyan", no_wrap=True)
        table.add_column("Capability", justify="center")
        table.add_column("Instantiable", justify="center")
        for name in registry.names():
            plugin = registry.get(name)
            table.add_row(
                escape(name),
                "✓" if plugin.implements_capability else "✗",
                "✓" if plugin.instantiable else "✗",
            )
        console.print(table)


def display_error(error: Exception) -> None:
    """Print an error, listing per-field problems for validation errors."""
    if isinstance(error, FormValidationError):
        console.print(f"[red]❌ Validation failed:[/red] {escape(str(error))}")
        for field, field_errors in error.errors.items():
            for field_error in field_errors:
                console.print(f"  • [bold]{field}[/bold] ({field_error.type}): {escape(field_error.message)}")
        return
    console.print(f"[red]❌ Error:[/red] {escape(str(error))}")
