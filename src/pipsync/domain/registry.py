"""
Registry of known package installation plugin implementations.

Class names entered through the form boundary are checked against this
registry instead of being resolved at runtime. Each registration records
whether the implementation provides the installation plugin capability and
whether it can be instantiated.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Separator of fully-qualified type names stored in PIP files
NAMESPACE_SEPARATOR = "\\"


@dataclass(frozen=True)
class RegisteredPlugin:
    """A type name known to the registry."""

    class_name: str
    implements_capability: bool
    instantiable: bool
    implementation: type | None = None


class PluginRegistry:
    """
    Explicit registry of plugin type names.

    Usage:
        registry = PluginRegistry(capability=PackageInstallationPlugin)
        registry.register("vendor\\plugin\\FooPlugin", FooPlugin)
        registry.get("vendor\\plugin\\FooPlugin").instantiable
    """

    def __init__(self, capability: type | None = None) -> None:
        self.capability = capability
        self._plugins: dict[str, RegisteredPlugin] = {}

    def register(self, class_name: str, implementation: type | None = None,
                 *, implements_capability: bool | None = None,
                 instantiable: bool | None = None) -> RegisteredPlugin:
        """
        Register a type name.

        Flags not given explicitly are derived from the implementation once,
        at registration time.
        """
        if not class_name or class_name.startswith(NAMESPACE_SEPARATOR):
            raise ValueError(f"Invalid plugin class name '{class_name}'")

        if implements_capability is None:
            implements_capability = bool(
                implementation is not None
                and self.capability is not None
                and issubclass(implementation, self.capability)
            )
        if instantiable is None:
            instantiable = bool(
                implementation is not None and not inspect.isabstract(implementation)
            )

        entry = RegisteredPlugin(
            class_name=class_name,
            implements_capability=implements_capability,
            instantiable=instantiable,
            implementation=implementation,
        )
        self._plugins[class_name] = entry
        logger.debug("Registered plugin type %s", class_name)
        return entry

    def get(self, class_name: str) -> RegisteredPlugin | None:
        return self._plugins.get(class_name)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

    def names(self) -> list[str]:
        return sorted(self._plugins)
