"""
Error types raised by the sync engine.

All errors derive from builtin exception types so callers that only
know about ValueError / LookupError keep working.
"""

from __future__ import annotations


class XmlParseError(ValueError):
    """Raised when a PIP document is not well-formed XML."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Malformed XML in {path}: {reason}")
        self.path = path
        self.reason = reason


class UnknownIdentifierError(LookupError):
    """Raised when an entry identifier resolves in none of the managed documents."""

    def __init__(self, identifier: str, message: str | None = None) -> None:
        super().__init__(message or f"Unknown entry with identifier '{identifier}'.")
        self.identifier = identifier


class MissingFieldError(ValueError):
    """Raised when a field mapping lacks a field the entry kind requires."""

    def __init__(self, field_id: str) -> None:
        super().__init__(f"Missing value for required field '{field_id}'")
        self.field_id = field_id


class FormValidationError(ValueError):
    """
    Raised by the form boundary when input fails validation.

    Attributes:
        errors: Mapping of field id to the validation errors of that field
    """

    def __init__(self, errors: dict) -> None:
        count = sum(len(field_errors) for field_errors in errors.values())
        fields = ", ".join(sorted(errors))
        super().__init__(f"{count} validation error(s) in field(s): {fields}")
        self.errors = errors
