"""
PIP Sync Service.

Single entry point for callers (CLI, tests, embedding code):
- editor operations: list / show / add / edit / delete entries, with form
  validation applied before the reconciler is invoked
- installer operations: install and uninstall the package's PIP files
- normalization: re-sort and rewrite all managed documents
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

from pipsync.application.entry_list import EntryList
from pipsync.application.plugins.base import XmlInstallationPlugin
from pipsync.application.reconciler.base import EntryReconciler
from pipsync.domain.errors import FormValidationError, UnknownIdentifierError
from pipsync.domain.models import EditResult, PluginRow
from pipsync.domain.validation import FormValidator
from pipsync.infrastructure.xml import XmlDocument

logger = logging.getLogger(__name__)


class SyncService:
    """
    Coordinates one plugin kind over its managed documents.

    Usage:
        service = container.sync_service
        service.add_entry({"pluginName": "foo", "className": "vendor\\plugin\\FooPlugin"})
        for entry in service.list_entries():
            print(entry.identifier, entry.fields)
    """

    def __init__(self, plugin: XmlInstallationPlugin, reconciler: EntryReconciler,
                 documents: list[XmlDocument], validator: FormValidator | None = None) -> None:
        self.plugin = plugin
        self.reconciler = reconciler
        self.documents = documents
        self.validator = validator

    def _form_fields(self, fields: Mapping[str, Any]) -> dict[str, str]:
        known = set(self.plugin.entry_kind.field_ids)
        return {key: "" if value is None else str(value).strip() for key, value in fields.items() if key in known}

    # ========================================================================
    # Editor
    # ========================================================================

    def list_entries(self) -> EntryList:
        return self.reconciler.get_entry_list()

    def show_entry(self, identifier: str) -> dict[str, Any]:
        fields, found = self.reconciler.get_entry_data(identifier)
        if not found:
            raise UnknownIdentifierError(identifier)
        return fields

    def add_entry(self, fields: Mapping[str, Any]) -> str:
        """
        Validate and add an entry to every managed document.

        Returns:
            Identifier of the new entry

        Raises:
            FormValidationError: If the input is invalid
        """
        form_fields = self._form_fields(fields)
        if self.validator is not None:
            self.validator.validate_or_raise(form_fields)

        with self.plugin.store.transaction():
            self.reconciler.add_entry(form_fields)

        identifier = form_fields.get(self._identifier_field(), "")
        logger.info("Entry '%s' added", identifier)
        return identifier

    def edit_entry(self, identifier: str, fields: Mapping[str, Any]) -> EditResult:
        """
        Validate and apply changes to an existing entry.

        Fields not given keep their current value.

        Raises:
            UnknownIdentifierError: If no managed document contains the entry
            FormValidationError: If the resulting input is invalid
        """
        self.reconciler.set_edited_entry_identifier(identifier)
        current, _ = self.reconciler.get_entry_data(identifier)

        form_fields = self._form_fields({**current, **{k: v for k, v in fields.items() if v is not None}})
        if self.validator is not None:
            try:
                self.validator.validate_or_raise(form_fields, edited_identifier=identifier)
            except FormValidationError:
                self.reconciler.clear_edited_entry()
                raise

        with self.plugin.store.transaction():
            result = self.reconciler.edit_entry(form_fields, identifier)

        if result.partial:
            logger.warning("Entry '%s' was not present in all managed documents", identifier)
        return result

    def delete_entry(self, identifier: str, add_delete_instruction: bool = False) -> None:
        with self.plugin.store.transaction():
            self.reconciler.delete_entry(identifier, add_delete_instruction)

    def _identifier_field(self) -> str:
        kind = self.plugin.entry_kind
        for binding in kind.bindings:
            if binding.target == kind.identifier_attribute:
                return binding.field_id
        return kind.identifier_attribute

    # ========================================================================
    # Installer
    # ========================================================================

    def install(self) -> int:
        """
        Synchronize all managed documents into the database.

        Returns:
            Number of rows owned by the package afterwards
        """
        with self.plugin.store.transaction():
            for document in self.documents:
                logger.info("Installing %s", document.path)
                self.plugin.install(document)
        return len(self.installed_plugins())

    def uninstall(self) -> None:
        with self.plugin.store.transaction():
            self.plugin.uninstall()

    def installed_plugins(self) -> list[PluginRow]:
        return self.plugin.store.list_plugins(self.plugin.installation.package_id)

    # ========================================================================
    # Normalization
    # ========================================================================

    def sort_documents(self) -> list[Path]:
        """Re-sort and rewrite every managed document."""
        written = []
        for document in self.documents:
            self.plugin.sort_document(document)
            written.append(document.write())
        return written
