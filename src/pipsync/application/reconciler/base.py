"""
Contracts of the entry reconciler.

EntryHandler is implemented by a plugin kind and supplies everything that is
specific to it (entry layout, insertion rule, sort, persistence hooks).
EntryReconciler is the editing capability offered to callers; it has a
single-document and a multi-document strategy.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from pipsync.domain.entry_kind import EntryKind
from pipsync.domain.models import EditResult
from pipsync.infrastructure.xml import XmlDocument


class EntryHandler(Protocol):
    """Plugin-kind specific behaviour the reconciler delegates to."""

    entry_kind: EntryKind

    def insert_element(self, document: XmlDocument, element) -> None:
        """Insert a freshly built entry element into the document."""
        ...

    def sort_document(self, document: XmlDocument) -> None:
        """Apply the deterministic sort before a write."""
        ...

    def fetch_element_data(self, element, notify: bool = True) -> dict[str, Any]:
        """Field id -> value of an entry element; listeners fire only if notify."""
        ...

    def entry_list_keys(self) -> dict[str, str]:
        """Field id -> label of the fields shown in entry lists."""
        ...

    def save_object(self, new_element, old_element=None) -> None:
        """Persist a new or replaced entry to the installed state."""
        ...

    def delete_object(self, element) -> None:
        """Remove a deleted entry from the installed state."""
        ...


class EntryReconciler(Protocol):
    """Add/edit/delete/list entries across the managed documents."""

    def add_entry(self, fields: Mapping[str, str]) -> None:
        ...

    def edit_entry(self, fields: Mapping[str, str], identifier: str) -> EditResult:
        ...

    def set_edited_entry_identifier(self, identifier: str) -> None:
        ...

    def clear_edited_entry(self) -> None:
        ...

    def delete_entry(self, identifier: str, add_delete_instruction: bool = False) -> None:
        ...

    def get_entry_data(self, identifier: str) -> tuple[dict[str, Any], bool]:
        ...

    def get_entry_list(self):
        ...
