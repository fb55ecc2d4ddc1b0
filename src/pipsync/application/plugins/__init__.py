"""
Package installation plugins.

Provides the plugin capability, the generic XML-to-table plugin and the
concrete plugin for <pip> entries.
"""

from pipsync.application.plugins.base import (
    PackageInstallationPlugin,
    XmlInstallationPlugin,
)
from pipsync.application.plugins.pip_plugin import (
    PIP_PLUGIN_CLASS_NAME,
    PipInstallationPlugin,
    default_registry,
)

__all__ = [
    "PIP_PLUGIN_CLASS_NAME",
    "PackageInstallationPlugin",
    "PipInstallationPlugin",
    "XmlInstallationPlugin",
    "default_registry",
]
