"""
Identifier resolution for PIP entries.

An entry's identifier is the value of one designated attribute. Lookups only
scan entry elements inside the document's containers, never the whole tree,
so unrelated nodes carrying the same attribute cannot match.
"""

from __future__ import annotations

from pipsync.domain.entry_kind import EntryKind
from pipsync.infrastructure.xml import XmlDocument


class IdentifierResolver:
    """Derives and resolves entry identifiers for one entry kind."""

    def __init__(self, entry_kind: EntryKind) -> None:
        self.entry_kind = entry_kind

    def identifier_of(self, element) -> str:
        return element.get(self.entry_kind.identifier_attribute) or ""

    def import_elements(self, document: XmlDocument) -> list:
        return document.entries("import", self.entry_kind.tag)

    def delete_elements(self, document: XmlDocument) -> list:
        return document.entries("delete", self.entry_kind.tag)

    def find_all(self, document: XmlDocument, identifier: str, container: str = "import") -> list:
        return document.xpath(
            "./*[local-name() = $container]/*[local-name() = $tag][@*[local-name() = $attribute] = $identifier]",
            container=container,
            tag=self.entry_kind.tag,
            attribute=self.entry_kind.identifier_attribute,
            identifier=identifier,
        )

    def find_by_identifier(self, document: XmlDocument, identifier: str):
        """First import entry with this identifier, or None."""
        matches = self.find_all(document, identifier)
        return matches[0] if matches else None
