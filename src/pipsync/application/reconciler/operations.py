"""
Element-level operations shared by both reconciler strategies.

Each method works on exactly one document; the strategies decide which
documents to visit and how to interpret misses.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Mapping

from pipsync.application.reconciler.base import EntryHandler
from pipsync.application.reconciler.identifier import IdentifierResolver
from pipsync.domain.errors import MissingFieldError
from pipsync.infrastructure.xml import XmlDocument

logger = logging.getLogger(__name__)


class ElementOperations:
    """Builds, inserts, replaces and removes entry elements of one handler."""

    def __init__(self, handler: EntryHandler) -> None:
        self.handler = handler
        self.resolver = IdentifierResolver(handler.entry_kind)

    @property
    def entry_kind(self):
        return self.handler.entry_kind

    # ========================================================================
    # Element construction
    # ========================================================================

    def create_element(self, document: XmlDocument, fields: Mapping[str, str]):
        """
        Build a detached entry element from a field mapping.

        The entry kind's binding table decides whether a field becomes an
        attribute or the element's text.

        Raises:
            MissingFieldError: If a required field is absent or empty
        """
        element = document.create_element(self.entry_kind.tag)
        for binding in self.entry_kind.bindings:
            value = fields.get(binding.field_id)
            value = "" if value is None else str(value)
            if not value:
                if binding.required:
                    raise MissingFieldError(binding.field_id)
                continue

            if binding.is_text:
                element.text = value
            else:
                element.set(binding.target, value)
        return element

    def read_fields(self, element) -> dict[str, str]:
        """Inverse of create_element; only fields present on the element are returned."""
        fields = {}
        for binding in self.entry_kind.bindings:
            if binding.is_text:
                text = (element.text or "").strip()
                if text:
                    fields[binding.field_id] = text
            elif element.get(binding.target) is not None:
                fields[binding.field_id] = element.get(binding.target)
        return fields

    # ========================================================================
    # Per-document mutations
    # ========================================================================

    def add_to_document(self, document: XmlDocument, fields: Mapping[str, str]):
        element = self.create_element(document, fields)
        self.handler.insert_element(document, element)
        try:
            self.handler.save_object(element, None)
        except Exception:
            element.getparent().remove(element)
            raise
        self.persist(document)
        logger.info(
            "Added entry '%s' to %s",
            self.resolver.identifier_of(element),
            document.path,
        )
        return element

    def replace_in_document(self, document: XmlDocument, fields: Mapping[str, str],
                            identifier: str, snapshot=None):
        """
        Swap the entry with `identifier` for a new element at the same position.

        Args:
            snapshot: Earlier copy of the old element to hand to the save hook

        Returns:
            The new element, or None if the document has no such entry
        """
        old_element = self.resolver.find_by_identifier(document, identifier)
        if old_element is None:
            return None

        new_element = self.create_element(document, fields)
        new_element.tail = old_element.tail
        old_element.getparent().replace(old_element, new_element)

        try:
            self.handler.save_object(new_element, snapshot if snapshot is not None else old_element)
        except Exception:
            # restore the old entry
            new_element.getparent().replace(new_element, old_element)
            raise
        self.persist(document)
        logger.info(
            "Replaced entry '%s' with '%s' in %s",
            identifier,
            self.resolver.identifier_of(new_element),
            document.path,
        )
        return new_element

    def remove_from_document(self, document: XmlDocument, identifier: str,
                             add_delete_instruction: bool = False) -> bool:
        """
        Remove all import entries with `identifier`.

        Returns:
            False if the document has no such entry
        """
        elements = self.resolver.find_all(document, identifier)
        if not elements:
            return False

        for element in elements:
            self.handler.delete_object(element)
        for element in elements:
            element.getparent().remove(element)

        if add_delete_instruction and not self.resolver.find_all(document, identifier, "delete"):
            container = document.ensure_container("delete")
            container.append(
                document.create_element(
                    self.entry_kind.tag,
                    attributes={self.entry_kind.identifier_attribute: identifier},
                )
            )

        self.persist(document)
        logger.info("Deleted entry '%s' from %s", identifier, document.path)
        return True

    def snapshot(self, document: XmlDocument, identifier: str):
        element = self.resolver.find_by_identifier(document, identifier)
        return copy.deepcopy(element) if element is not None else None

    def persist(self, document: XmlDocument) -> Path:
        self.handler.sort_document(document)
        return document.write()
