"""
Domain models for pipsync.

This module contains the core entities shared by the installer and the
entry editor:
- Packages and the installation that owns a PIP run
- Parsed element data handed to the database sync plugin
- Database rows of the package installation plugin table
- Results of editor operations

These models are pure data structures with no I/O dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Package identifier of the framework core; its plugins get priority 1
CORE_PACKAGE = "com.woltlab.wcf"


# ============================================================================
# Packages
# ============================================================================

@dataclass
class Package:
    """
    Represents an installed (or installing) package.

    Attributes:
        id: packageID in the database (None until registered)
        package: Package identifier, e.g. "com.example.forum"
        package_name: Human readable name
    """
    id: int | None = None
    package: str = ""
    package_name: str = ""

    @property
    def is_core(self) -> bool:
        return self.package == CORE_PACKAGE


@dataclass
class PackageInstallation:
    """The installation step a plugin runs in."""
    package: Package

    @property
    def package_id(self) -> int:
        if self.package.id is None:
            raise ValueError(f"Package '{self.package.package}' is not registered")
        return self.package.id


# ============================================================================
# XML element data
# ============================================================================

@dataclass
class ElementData:
    """
    Parsed form of one XML entry element.

    Attributes:
        attributes: Element attributes (e.g. {"name": "foo"})
        node_value: Text content of the element, stripped
        elements: Child element tag -> text, for entries with nested values
    """
    attributes: dict[str, str] = field(default_factory=dict)
    node_value: str = ""
    elements: dict[str, str] = field(default_factory=dict)


@dataclass
class PluginRow:
    """Row of the package_installation_plugin table."""
    plugin_name: str
    class_name: str
    priority: int = 0
    package_id: int | None = None

    @classmethod
    def from_row(cls, row: Any) -> PluginRow:
        return cls(
            plugin_name=row["pluginName"],
            class_name=row["className"],
            priority=row["priority"],
            package_id=row["packageID"],
        )


# ============================================================================
# Editor results
# ============================================================================

@dataclass
class EditResult:
    """
    Outcome of an edit across the managed documents.

    Attributes:
        identifier: Identifier of the replacement entry (may differ from the old one)
        partial: True if at least one managed document lacked the entry
        documents: Paths of the documents that were rewritten
    """
    identifier: str
    partial: bool = False
    documents: list[Path] = field(default_factory=list)
