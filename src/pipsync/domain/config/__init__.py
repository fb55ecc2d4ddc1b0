"""
Configuration domain package.

This package contains the domain layer for configuration management.
"""

from .sync_config import PackageConfig, SyncConfig

__all__ = [
    "PackageConfig",
    "SyncConfig",
]
