"""
Reconciler for plugins backed by exactly one document.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping

from pipsync.application.entry_list import EntryList, build_entry_list
from pipsync.application.reconciler.operations import ElementOperations
from pipsync.domain.errors import UnknownIdentifierError
from pipsync.domain.models import EditResult
from pipsync.infrastructure.xml import XmlDocument


class SingleDocumentReconciler:
    """EntryReconciler over one document."""

    def __init__(self, operations: ElementOperations, document: XmlDocument) -> None:
        self.operations = operations
        self.document = document
        self._edited_entry = None
        self._edited_identifier: str | None = None

    @property
    def documents(self) -> list[XmlDocument]:
        return [self.document]

    @property
    def edited_entry(self):
        return self._edited_entry

    def add_entry(self, fields: Mapping[str, str]) -> None:
        self.operations.add_to_document(self.document, fields)

    def edit_entry(self, fields: Mapping[str, str], identifier: str) -> EditResult:
        snapshot = self._edited_entry if identifier == self._edited_identifier else None
        new_element = self.operations.replace_in_document(self.document, fields, identifier, snapshot)
        if new_element is None:
            raise UnknownIdentifierError(identifier, "Have not edited any entry: no entry found to edit")

        self.clear_edited_entry()
        return EditResult(
            identifier=self.operations.resolver.identifier_of(new_element),
            partial=False,
            documents=[self.document.path],
        )

    def set_edited_entry_identifier(self, identifier: str) -> None:
        element = self.operations.resolver.find_by_identifier(self.document, identifier)
        if element is None:
            raise UnknownIdentifierError(identifier)
        self._edited_entry = copy.deepcopy(element)
        self._edited_identifier = identifier

    def clear_edited_entry(self) -> None:
        self._edited_entry = None
        self._edited_identifier = None

    def delete_entry(self, identifier: str, add_delete_instruction: bool = False) -> None:
        if not self.operations.remove_from_document(self.document, identifier, add_delete_instruction):
            raise UnknownIdentifierError(identifier)

    def get_entry_data(self, identifier: str) -> tuple[dict[str, Any], bool]:
        element = self.operations.resolver.find_by_identifier(self.document, identifier)
        if element is None:
            return {}, False
        return self.operations.handler.fetch_element_data(element, notify=False), True

    def get_entry_list(self) -> EntryList:
        return build_entry_list(self.operations.handler, [self.document])
