"""
Form-boundary validation for PIP entries.

Input coming from an editor is checked here before the reconciler is ever
invoked. Errors are collected per field so the caller can report all of them
at once; the reconciler itself trusts its field mapping.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Mapping

from pipsync.domain.errors import FormValidationError
from pipsync.domain.registry import NAMESPACE_SEPARATOR, PluginRegistry

logger = logging.getLogger(__name__)

PLUGIN_NAME_PATTERN = re.compile(r"^[a-z][A-Za-z]+$")


@dataclass(frozen=True)
class FormFieldValidationError:
    """One validation failure of one field."""

    field: str
    type: str
    message: str


@dataclass(frozen=True)
class FieldValidator:
    """
    Named check of a single field.

    The check receives the field value and the validation context and returns
    an error (type, message) or None.
    """

    field: str
    name: str
    check: Callable[[str, "ValidationContext"], tuple[str, str] | None]


@dataclass(frozen=True)
class ValidationContext:
    """Values available to validators besides the field value itself."""

    fields: Mapping[str, str]
    edited_identifier: str | None = None


class FormValidator:
    """Runs required-field checks and then the registered field validators."""

    def __init__(self, required: list[str] | None = None) -> None:
        self.required = list(required or [])
        self.validators: list[FieldValidator] = []

    def add_validator(self, field: str, name: str, check) -> FormValidator:
        self.validators.append(FieldValidator(field, name, check))
        return self

    def validate(self, fields: Mapping[str, str],
                 edited_identifier: str | None = None) -> dict[str, list[FormFieldValidationError]]:
        """
        Validate a field mapping.

        Args:
            fields: Form values keyed by field id
            edited_identifier: Identifier of the entry being edited, if any

        Returns:
            Field id -> errors; empty when the input is valid
        """
        errors: dict[str, list[FormFieldValidationError]] = {}
        context = ValidationContext(fields=fields, edited_identifier=edited_identifier)

        empty = set()
        for field in self.required:
            if not str(fields.get(field) or "").strip():
                empty.add(field)
                errors.setdefault(field, []).append(
                    FormFieldValidationError(field, "empty", f"{field} is required")
                )

        for validator in self.validators:
            if validator.field in empty:
                continue
            value = str(fields.get(validator.field) or "")
            result = validator.check(value, context)
            if result is not None:
                error_type, message = result
                errors.setdefault(validator.field, []).append(
                    FormFieldValidationError(validator.field, error_type, message)
                )

        if errors:
            logger.debug("Form validation failed for fields: %s", ", ".join(sorted(errors)))
        return errors

    def validate_or_raise(self, fields: Mapping[str, str],
                          edited_identifier: str | None = None) -> None:
        errors = self.validate(fields, edited_identifier)
        if errors:
            raise FormValidationError(errors)


# =============================================================================
# PIP entry validators
# =============================================================================

def check_plugin_name_format(value: str, context: ValidationContext):
    if PLUGIN_NAME_PATTERN.match(value) is None:
        return "format", f"Plugin name '{value}' must match {PLUGIN_NAME_PATTERN.pattern}"
    return None


def check_no_leading_separator(value: str, context: ValidationContext):
    if value.startswith(NAMESPACE_SEPARATOR):
        return "leadingBackslash", f"Class name '{value}' must not start with a backslash"
    return None


def build_pip_form_validator(registry: PluginRegistry,
                             plugin_name_exists: Callable[[str], bool]) -> FormValidator:
    """
    Build the validator for package installation plugin entries.

    Args:
        registry: Known plugin implementations
        plugin_name_exists: Lookup of already registered plugin names
    """

    def check_unique(value: str, context: ValidationContext):
        # The edited entry keeps its own name.
        if context.edited_identifier is not None and value == context.edited_identifier:
            return None
        if plugin_name_exists(value):
            return "notUnique", f"Plugin name '{value}' is already registered"
        return None

    def check_exists(value: str, context: ValidationContext):
        if value not in registry:
            return "nonExistent", f"Class '{value}' is unknown"
        return None

    def check_interface(value: str, context: ValidationContext):
        plugin = registry.get(value)
        if plugin is not None and not plugin.implements_capability:
            return "interface", f"Class '{value}' is no package installation plugin"
        return None

    def check_instantiable(value: str, context: ValidationContext):
        plugin = registry.get(value)
        if plugin is not None and not plugin.instantiable:
            return "isInstantiable", f"Class '{value}' cannot be instantiated"
        return None

    validator = FormValidator(required=["pluginName", "className"])
    validator.add_validator("pluginName", "format", check_plugin_name_format)
    validator.add_validator("pluginName", "uniqueness", check_unique)
    validator.add_validator("className", "noLeadingBackslash", check_no_leading_separator)
    validator.add_validator("className", "classExists", check_exists)
    validator.add_validator("className", "implementsInterface", check_interface)
    validator.add_validator("className", "isInstantiable", check_instantiable)
    return validator
