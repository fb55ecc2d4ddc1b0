"""
Declarative description of PIP entry kinds.

An entry kind says which XML tag holds entries, which attribute is the
business key and how form fields map onto the element: each field binds
either to an attribute or to the element's text content.
"""

from __future__ import annotations

from dataclasses import dataclass

# Binding target for the element's text content
TEXT_CONTENT = "__value"


@dataclass(frozen=True)
class FieldBinding:
    """Maps one form field onto an XML attribute or the element text."""

    field_id: str
    target: str
    required: bool = True
    label: str = ""

    @property
    def is_text(self) -> bool:
        return self.target == TEXT_CONTENT


@dataclass(frozen=True)
class EntryKind:
    """
    Entry layout of one plugin kind.

    Attributes:
        tag: Tag name of entry elements (e.g. "pip")
        identifier_attribute: Attribute holding the business key (e.g. "name")
        bindings: Field binding table, in form order
    """

    tag: str
    identifier_attribute: str
    bindings: tuple[FieldBinding, ...]

    def __post_init__(self) -> None:
        if not self.tag:
            raise ValueError("tag cannot be empty")
        seen = set()
        for binding in self.bindings:
            if binding.field_id in seen:
                raise ValueError(f"Duplicate field binding '{binding.field_id}'")
            seen.add(binding.field_id)

    @property
    def field_ids(self) -> list[str]:
        return [binding.field_id for binding in self.bindings]

    def binding(self, field_id: str) -> FieldBinding | None:
        for binding in self.bindings:
            if binding.field_id == field_id:
                return binding
        return None

    def labels(self) -> dict[str, str]:
        """Field id -> display label, used as entry list keys."""
        return {b.field_id: b.label or b.field_id for b in self.bindings}


PIP_ENTRY_KIND = EntryKind(
    tag="pip",
    identifier_attribute="name",
    bindings=(
        FieldBinding("pluginName", "name", label="Plugin Name"),
        FieldBinding("className", TEXT_CONTENT, label="Class Name"),
    ),
)
