"""
Entry lists of PIP documents.

An entry list is a read-only projection of the import entries: identifier
plus the subset of fields named by the list's keys. Building a list never
fires element data listeners and never touches the installed state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

from pipsync.application.reconciler.base import EntryHandler
from pipsync.application.reconciler.identifier import IdentifierResolver
from pipsync.infrastructure.xml import XmlDocument


@dataclass
class EntryListEntry:
    identifier: str
    fields: dict[str, str] = field(default_factory=dict)


class EntryList:
    """
    Ordered listing of entries, keyed by identifier.

    The same identifier may appear in several documents of a multi-document
    plugin; it is listed once and fields missing from the first occurrence
    are filled in from later ones.
    """

    def __init__(self, keys: Mapping[str, str] | None = None) -> None:
        self._keys: dict[str, str] = dict(keys or {})
        self._entries: dict[str, EntryListEntry] = {}

    @property
    def keys(self) -> dict[str, str]:
        """Field id -> label."""
        return dict(self._keys)

    def set_keys(self, keys: Mapping[str, str]) -> None:
        if self._entries:
            raise ValueError("Cannot change keys of a non-empty entry list")
        self._keys = dict(keys)

    def add_entry(self, identifier: str, fields: Mapping[str, object]) -> EntryListEntry:
        if not self._keys:
            raise ValueError("Entry list keys have not been set")

        unknown = set(fields) - set(self._keys)
        if unknown:
            raise ValueError(f"Unknown entry list keys: {', '.join(sorted(unknown))}")

        entry = self._entries.get(identifier)
        if entry is None:
            entry = EntryListEntry(identifier)
            self._entries[identifier] = entry
        for key, value in fields.items():
            entry.fields.setdefault(key, "" if value is None else str(value))
        return entry

    def get_entry(self, identifier: str) -> EntryListEntry | None:
        return self._entries.get(identifier)

    @property
    def entries(self) -> list[EntryListEntry]:
        return list(self._entries.values())

    def as_dicts(self) -> list[dict]:
        return [{"identifier": e.identifier, "fields": dict(e.fields)} for e in self._entries.values()]

    def __iter__(self) -> Iterator[EntryListEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries


def build_entry_list(handler: EntryHandler, documents: Iterable[XmlDocument],
                     keys: Mapping[str, str] | None = None) -> EntryList:
    """
    List the import entries of all given documents.

    Args:
        handler: Plugin kind supplying element data
        documents: Managed documents, in order
        keys: Field id -> label; defaults to the handler's entry list keys
    """
    resolver = IdentifierResolver(handler.entry_kind)
    entry_list = EntryList(keys if keys is not None else handler.entry_list_keys())
    wanted = set(entry_list.keys)

    for document in documents:
        for element in resolver.import_elements(document):
            data = handler.fetch_element_data(element, notify=False)
            entry_list.add_entry(
                resolver.identifier_of(element),
                {key: value for key, value in data.items() if key in wanted},
            )

    return entry_list
