"""
SQLite infrastructure package.

Provides SQLite storage of the installed state.
"""

from pipsync.infrastructure.sqlite.store import InstallationStore
from pipsync.infrastructure.sqlite.schema import (
    SCHEMA_TABLES,
    initialize_schema,
)

__all__ = [
    "InstallationStore",
    "SCHEMA_TABLES",
    "initialize_schema",
]
