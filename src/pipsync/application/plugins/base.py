"""
Base classes of package installation plugins.

PackageInstallationPlugin is the capability every registered plugin type
provides. XmlInstallationPlugin implements it for plugins that mirror XML
entries into one database table and doubles as the EntryHandler used by the
entry reconciler:

- install(): apply <delete> items, then insert or update every <import> item
- save_object() / delete_object(): keep rows in step with editor changes
- fetch_element_data(): element data for forms and entry lists, with
  listeners fired only when notify is set
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping

from pipsync.application.reconciler.identifier import IdentifierResolver
from pipsync.domain.entry_kind import EntryKind
from pipsync.domain.models import ElementData, PackageInstallation
from pipsync.infrastructure.sqlite import InstallationStore
from pipsync.infrastructure.xml import XmlDocument, local_name

logger = logging.getLogger(__name__)

ElementDataListener = Callable[[Any, dict], None]


class PackageInstallationPlugin(ABC):
    """Capability of a package installation plugin."""

    def __init__(self, store: InstallationStore, installation: PackageInstallation) -> None:
        self.store = store
        self.installation = installation

    @abstractmethod
    def install(self, document: XmlDocument) -> None:
        ...

    @abstractmethod
    def uninstall(self) -> None:
        ...

    @classmethod
    def get_default_filename(cls) -> str | None:
        return None

    @staticmethod
    def get_sync_dependencies() -> list[str]:
        return []


class XmlInstallationPlugin(PackageInstallationPlugin):
    """
    XML-driven plugin backed by one table.

    Subclasses set table_name, entry_kind and key_columns and implement
    prepare_import, find_existing_item, handle_delete and get_element_data.
    """

    table_name: str = ""
    entry_kind: EntryKind
    key_columns: tuple[str, ...] = ()

    def __init__(self, store: InstallationStore, installation: PackageInstallation,
                 listeners: list[ElementDataListener] | None = None) -> None:
        super().__init__(store, installation)
        self.listeners: list[ElementDataListener] = list(listeners or [])
        self.resolver = IdentifierResolver(self.entry_kind)

    @property
    def tag_name(self) -> str:
        return self.entry_kind.tag

    # ========================================================================
    # Hooks for subclasses
    # ========================================================================

    @abstractmethod
    def prepare_import(self, data: ElementData) -> dict[str, Any]:
        """Map parsed element data onto row values."""

    @abstractmethod
    def find_existing_item(self, row: Mapping[str, Any]) -> tuple[str, list]:
        """SQL and parameters selecting the row a re-import should update."""

    @abstractmethod
    def handle_delete(self, items: list[ElementData]) -> None:
        """Remove the rows of the given <delete> items."""

    @abstractmethod
    def get_element_data(self, element) -> dict[str, Any]:
        """Field id -> value of an entry element."""

    def validate_import(self, row: Mapping[str, Any]) -> None:
        pass

    def post_import(self) -> None:
        pass

    # ========================================================================
    # Installer
    # ========================================================================

    def element_data(self, element) -> ElementData:
        """Parse an entry element into attributes, text and child values."""
        elements = {}
        for child in element:
            name = local_name(child)
            if name is not None:
                elements[name] = (child.text or "").strip()
        return ElementData(
            attributes=dict(element.attrib),
            node_value=(element.text or "").strip(),
            elements=elements,
        )

    def install(self, document: XmlDocument) -> None:
        """
        Synchronize the document into the table.

        <delete> items are processed before <import> items; the whole step
        runs in one transaction.
        """
        delete_items = [self.element_data(e) for e in self.resolver.delete_elements(document)]
        import_items = [self.element_data(e) for e in self.resolver.import_elements(document)]

        with self.store.transaction():
            if delete_items:
                self.handle_delete(delete_items)
                logger.info("Deleted %d %s item(s)", len(delete_items), self.tag_name)

            for data in import_items:
                row = self.prepare_import(data)
                self.validate_import(row)
                self.import_row(row)

            self.post_import()

        logger.info(
            "Installed %d %s item(s) for package %s",
            len(import_items),
            self.tag_name,
            self.installation.package.package,
        )

    def import_row(self, row: Mapping[str, Any]) -> None:
        """Insert the row, or update the existing row with the same business key."""
        sql, parameters = self.find_existing_item(row)
        existing = self.store.fetch_one(sql, parameters)
        if existing is not None:
            self.update_row(existing, row)
        else:
            self.store.insert(self.table_name, {**row, "packageID": self.installation.package_id})

    def update_row(self, existing, row: Mapping[str, Any]) -> None:
        where = {column: existing[column] for column in self.key_columns}
        self.store.update(self.table_name, dict(row), where)

    def uninstall(self) -> None:
        self.store.execute(
            f"DELETE FROM {self.table_name} WHERE packageID = ?",
            (self.installation.package_id,),
        )
        logger.info(
            "Uninstalled %s items of package %s",
            self.tag_name,
            self.installation.package.package,
        )

    # ========================================================================
    # EntryHandler
    # ========================================================================

    def fetch_element_data(self, element, notify: bool = True) -> dict[str, Any]:
        data = self.get_element_data(element)
        if notify:
            for listener in self.listeners:
                listener(element, data)
        return data

    def entry_list_keys(self) -> dict[str, str]:
        return self.entry_kind.labels()

    def insert_element(self, document: XmlDocument, element) -> None:
        document.ensure_container("import").append(element)

    def save_object(self, new_element, old_element=None) -> None:
        """
        Persist an editor change.

        A new entry is imported; a replaced entry updates the row matched by
        the old element's business key, or is inserted if that row is gone.
        """
        row = self.prepare_import(self.element_data(new_element))
        # fires element data listeners
        self.fetch_element_data(new_element)

        with self.store.transaction():
            if old_element is None:
                self.import_row(row)
                return

            old_row = self.prepare_import(self.element_data(old_element))
            sql, parameters = self.find_existing_item(old_row)
            existing = self.store.fetch_one(sql, parameters)
            if existing is not None:
                self.update_row(existing, row)
            else:
                self.import_row(row)

    def delete_object(self, element) -> None:
        self.handle_delete([self.element_data(element)])
