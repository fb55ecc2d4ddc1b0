"""
Installs, updates and deletes package installation plugins.

Entries look like

    <pip name="templateListener">vendor\\plugin\\TemplateListenerPlugin</pip>

and are mirrored into the package_installation_plugin table, one row per
(pluginName, packageID).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pipsync.application.plugins.base import PackageInstallationPlugin, XmlInstallationPlugin
from pipsync.application.reconciler.serializer import DocumentSorter
from pipsync.domain.entry_kind import PIP_ENTRY_KIND
from pipsync.domain.models import ElementData
from pipsync.domain.registry import PluginRegistry
from pipsync.domain.validation import FormValidator, build_pip_form_validator
from pipsync.infrastructure.xml import XmlDocument

logger = logging.getLogger(__name__)

# Type name under which this plugin registers itself
PIP_PLUGIN_CLASS_NAME = "pipsync\\plugin\\PipInstallationPlugin"


class PipInstallationPlugin(XmlInstallationPlugin):
    """Package installation plugin for <pip> entries."""

    table_name = "package_installation_plugin"
    entry_kind = PIP_ENTRY_KIND
    key_columns = ("pluginName", "packageID")

    @classmethod
    def get_default_filename(cls) -> str:
        return "packageInstallationPlugin.xml"

    @property
    def priority(self) -> int:
        return 1 if self.installation.package.is_core else 0

    def prepare_import(self, data: ElementData) -> dict[str, Any]:
        return {
            "className": data.node_value,
            "pluginName": data.attributes.get("name", ""),
            "priority": self.priority,
        }

    def validate_import(self, row: Mapping[str, Any]) -> None:
        if not row["pluginName"]:
            raise ValueError("<pip> entry without a name attribute")
        if not row["className"]:
            raise ValueError(f"<pip> entry '{row['pluginName']}' has no class name")

    def find_existing_item(self, row: Mapping[str, Any]) -> tuple[str, list]:
        sql = """
            SELECT *
            FROM package_installation_plugin
            WHERE pluginName = ?
              AND packageID = ?
        """
        return sql, [row["pluginName"], self.installation.package_id]

    def handle_delete(self, items: list[ElementData]) -> None:
        sql = """
            DELETE FROM package_installation_plugin
            WHERE pluginName = ?
              AND packageID = ?
        """
        logger.debug("Deleting %d pip row(s) of packageID=%d", len(items), self.installation.package_id)
        with self.store.transaction():
            for item in items:
                self.store.execute(sql, (item.attributes.get("name", ""), self.installation.package_id))

    def get_element_data(self, element) -> dict[str, Any]:
        return {
            "className": (element.text or "").strip(),
            "pluginName": element.get("name", ""),
            "priority": self.priority,
        }

    def sort_document(self, document: XmlDocument) -> None:
        DocumentSorter(key=lambda element: element.get("name", "")).sort(document)

    def build_form_validator(self, registry: PluginRegistry) -> FormValidator:
        return build_pip_form_validator(registry, self.store.plugin_name_exists)


def default_registry() -> PluginRegistry:
    """Registry holding the plugin types shipped with pipsync."""
    registry = PluginRegistry(capability=PackageInstallationPlugin)
    registry.register(PIP_PLUGIN_CLASS_NAME, PipInstallationPlugin)
    return registry

