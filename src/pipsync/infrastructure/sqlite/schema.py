"""
SQLite schema for the installed state.

Tables:
- package: installed packages, keyed by their identifier
- package_installation_plugin: registered PIPs, unique per (pluginName, packageID)
- schema_meta: schema version bookkeeping
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# Schema version - increment when making breaking changes
SCHEMA_VERSION = 1

SCHEMA_TABLES = {
    "package": """
        CREATE TABLE IF NOT EXISTS package (
            packageID INTEGER PRIMARY KEY AUTOINCREMENT,
            package TEXT NOT NULL UNIQUE,
            packageName TEXT NOT NULL DEFAULT ''
        )
    """,
    "package_installation_plugin": """
        CREATE TABLE IF NOT EXISTS package_installation_plugin (
            pluginName TEXT NOT NULL,
            packageID INTEGER NOT NULL,
            priority INTEGER NOT NULL DEFAULT 0,
            className TEXT NOT NULL,
            FOREIGN KEY (packageID) REFERENCES package(packageID) ON DELETE CASCADE,
            UNIQUE (pluginName, packageID)
        )
    """,
    "schema_meta": """
        CREATE TABLE IF NOT EXISTS schema_meta (
            key TEXT PRIMARY KEY,
            value TEXT
        )
    """,
}


def initialize_schema(conn: sqlite3.Connection) -> None:
    """
    Create all tables if they don't exist.

    Safe to call multiple times - uses CREATE TABLE IF NOT EXISTS.
    """
    for name, ddl in SCHEMA_TABLES.items():
        conn.execute(ddl)
        logger.debug("Ensured table %s", name)

    conn.execute(
        "INSERT OR REPLACE INTO schema_meta (key, value) VALUES ('version', ?)",
        (str(SCHEMA_VERSION),),
    )
    conn.commit()
    logger.info("Database schema initialized (version %d)", SCHEMA_VERSION)
