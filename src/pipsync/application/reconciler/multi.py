"""
Reconciler for plugins whose entries span several documents.

A package may reference several project XML files sharing one schema. Every
mutation visits all of them:
- add inserts the entry into each document
- edit replaces the entry wherever it exists and skips documents lacking it,
  reporting the inconsistency through EditResult.partial
- delete removes the entry wherever it exists

set_edited_entry_identifier is strict: it fails when no document knows the
identifier, while edit only fails when every document lacks it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence, Union

from pipsync.application.entry_list import EntryList, build_entry_list
from pipsync.application.reconciler.operations import ElementOperations
from pipsync.domain.errors import UnknownIdentifierError
from pipsync.domain.models import EditResult
from pipsync.infrastructure.xml import XmlDocument

logger = logging.getLogger(__name__)

DocumentSource = Union[Sequence[XmlDocument], Callable[[], Sequence[XmlDocument]]]


def _document_key(document: XmlDocument):
    return str(document.path) if document.path is not None else id(document)


class MultiDocumentReconciler:
    """
    EntryReconciler over a set of documents.

    Args:
        operations: Element operations of the plugin kind
        documents: The managed documents, or a callable returning them
    """

    def __init__(self, operations: ElementOperations, documents: DocumentSource) -> None:
        self.operations = operations
        self._documents = documents
        self._edited_entries: dict[Any, Any] = {}
        self._edited_identifier: str | None = None

    @property
    def documents(self) -> list[XmlDocument]:
        if callable(self._documents):
            return list(self._documents())
        return list(self._documents)

    @property
    def edited_entries(self) -> list:
        """Snapshots cached by set_edited_entry_identifier."""
        return list(self._edited_entries.values())

    def add_entry(self, fields: Mapping[str, str]) -> None:
        for document in self.documents:
            self.operations.add_to_document(document, fields)

    def edit_entry(self, fields: Mapping[str, str], identifier: str) -> EditResult:
        """
        Replace the entry `identifier` in every document containing it.

        Returns:
            EditResult with the new identifier and whether any document lacked the entry

        Raises:
            UnknownIdentifierError: If no document contains the entry
        """
        documents = self.documents
        snapshots = self._edited_entries if identifier == self._edited_identifier else {}
        new_element = None
        written = []
        missing = 0

        for document in documents:
            snapshot = snapshots.get(_document_key(document))
            element = self.operations.replace_in_document(document, fields, identifier, snapshot)
            if element is None:
                missing += 1
                continue
            new_element = element
            written.append(document.path)

        if new_element is None:
            raise UnknownIdentifierError(identifier, "Have not edited any entry: no entry found to edit")

        partial = missing > 0
        if partial:
            logger.warning(
                "Entry '%s' is missing from %d of %d documents",
                identifier,
                missing,
                len(documents),
            )

        self.clear_edited_entry()
        return EditResult(
            identifier=self.operations.resolver.identifier_of(new_element),
            partial=partial,
            documents=written,
        )

    def set_edited_entry_identifier(self, identifier: str) -> None:
        """
        Cache the current state of the entry as the 'before' snapshot of the next edit.

        Raises:
            UnknownIdentifierError: If no document contains the entry
        """
        edited_entries = {}
        for document in self.documents:
            snapshot = self.operations.snapshot(document, identifier)
            if snapshot is not None:
                edited_entries[_document_key(document)] = snapshot

        if not edited_entries:
            raise UnknownIdentifierError(identifier)

        self._edited_entries = edited_entries
        self._edited_identifier = identifier

    def clear_edited_entry(self) -> None:
        self._edited_entries = {}
        self._edited_identifier = None

    def delete_entry(self, identifier: str, add_delete_instruction: bool = False) -> None:
        deleted = False
        for document in self.documents:
            if self.operations.remove_from_document(document, identifier, add_delete_instruction):
                deleted = True

        if not deleted:
            raise UnknownIdentifierError(identifier)

    def get_entry_data(self, identifier: str) -> tuple[dict[str, Any], bool]:
        """
        Field values of an entry merged across documents.

        Returns:
            (fields, found) where found is False if no document contains the entry
        """
        fields: dict[str, Any] = {}
        missing = 0
        documents = self.documents
        for document in documents:
            element = self.operations.resolver.find_by_identifier(document, identifier)
            if element is None:
                missing += 1
                continue
            for key, value in self.operations.handler.fetch_element_data(element, notify=False).items():
                fields.setdefault(key, value)

        return fields, missing != len(documents)

    def get_entry_list(self) -> EntryList:
        return build_entry_list(self.operations.handler, self.documents)
