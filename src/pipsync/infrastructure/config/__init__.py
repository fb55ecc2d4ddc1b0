"""
Configuration infrastructure package.

Provides loading and caching of the sync configuration file.
"""

from pipsync.infrastructure.config.manager import ConfigManager
from pipsync.infrastructure.config.repository import ConfigRepository

__all__ = [
    "ConfigManager",
    "ConfigRepository",
]
