"""
SQLite-based store for the installed state.

Provides:
- Package registration
- Generic row insert/update/delete used by installation plugins
- Queries over registered package installation plugins
- Transactions wrapping a full installation step

Uses stdlib sqlite3 with no ORM.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping, Sequence

from pipsync.domain.models import Package, PluginRow
from pipsync.infrastructure.sqlite.schema import initialize_schema

logger = logging.getLogger(__name__)


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


class InstallationStore:
    """
    SQLite-backed storage of installed packages and their plugin rows.

    Usage:
        store = InstallationStore(Path("output/installation.db"))
        store.initialize_schema()

        package = store.register_package(Package(package="com.example.forum"))
        with store.transaction():
            store.insert("package_installation_plugin", {...})
    """

    def __init__(self, db_path: Path | str) -> None:
        """
        Initialize installation store.

        Args:
            db_path: Path to SQLite database file (created if not exists),
                     or ":memory:" for a private in-memory database
        """
        self.db_path = db_path if db_path == ":memory:" else Path(db_path)
        self._connection: sqlite3.Connection | None = None
        self._transaction_depth = 0
        logger.info("InstallationStore initialized: %s", self.db_path)

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create database connection."""
        if self._connection is None:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                target = str(self.db_path)
            else:
                target = self.db_path

            self._connection = sqlite3.connect(target)
            self._connection.execute("PRAGMA foreign_keys = ON")
            self._connection.row_factory = sqlite3.Row
            logger.debug("Database connection established")
        return self._connection

    def close(self) -> None:
        """Close database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.debug("Database connection closed")

    def initialize_schema(self) -> None:
        initialize_schema(self._get_connection())

    # ========================================================================
    # Transactions
    # ========================================================================

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block in one transaction.

        Nested blocks join the outermost transaction; only the outermost
        block commits. Any exception rolls the whole transaction back.
        """
        conn = self._get_connection()
        self._transaction_depth += 1
        try:
            yield conn
        except Exception:
            self._transaction_depth -= 1
            if self._transaction_depth == 0:
                conn.rollback()
                logger.warning("Transaction rolled back")
            raise
        else:
            self._transaction_depth -= 1
            if self._transaction_depth == 0:
                conn.commit()

    # ========================================================================
    # Generic statements
    # ========================================================================

    def execute(self, sql: str, parameters: Sequence[Any] = ()) -> sqlite3.Cursor:
        with self.transaction() as conn:
            return conn.execute(sql, tuple(parameters))

    def fetch_one(self, sql: str, parameters: Sequence[Any] = ()) -> sqlite3.Row | None:
        return self._get_connection().execute(sql, tuple(parameters)).fetchone()

    def fetch_all(self, sql: str, parameters: Sequence[Any] = ()) -> list[sqlite3.Row]:
        return self._get_connection().execute(sql, tuple(parameters)).fetchall()

    def insert(self, table: str, values: Mapping[str, Any]) -> int:
        """Insert one row and return its rowid."""
        columns = ", ".join(_quote(column) for column in values)
        placeholders = ", ".join("?" for _ in values)
        cursor = self.execute(
            f"INSERT INTO {_quote(table)} ({columns}) VALUES ({placeholders})",
            list(values.values()),
        )
        return cursor.lastrowid

    def update(self, table: str, values: Mapping[str, Any], where: Mapping[str, Any]) -> int:
        """Update rows matching all `where` columns; returns the affected row count."""
        assignments = ", ".join(f"{_quote(column)} = ?" for column in values)
        conditions = " AND ".join(f"{_quote(column)} = ?" for column in where)
        cursor = self.execute(
            f"UPDATE {_quote(table)} SET {assignments} WHERE {conditions}",
            [*values.values(), *where.values()],
        )
        return cursor.rowcount

    # ========================================================================
    # Packages
    # ========================================================================

    def register_package(self, package: Package) -> Package:
        """
        Insert a package or look up its existing packageID.

        Returns:
            Package with id populated
        """
        row = self.fetch_one(
            "SELECT packageID, package, packageName FROM package WHERE package = ?",
            (package.package,),
        )
        if row is not None:
            return Package(id=row["packageID"], package=row["package"], package_name=row["packageName"])

        values = {"package": package.package, "packageName": package.package_name}
        if package.id is not None:
            values["packageID"] = package.id
        package_id = self.insert("package", values)
        logger.info("Registered package %s (packageID=%d)", package.package, package_id)
        return Package(id=package_id, package=package.package, package_name=package.package_name)

    def get_package(self, package_id: int) -> Package | None:
        row = self.fetch_one(
            "SELECT packageID, package, packageName FROM package WHERE packageID = ?",
            (package_id,),
        )
        if row is None:
            return None
        return Package(id=row["packageID"], package=row["package"], package_name=row["packageName"])

    # ========================================================================
    # Package installation plugins
    # ========================================================================

    def plugin_name_exists(self, plugin_name: str) -> bool:
        """Check whether any package registered a plugin under this name."""
        row = self.fetch_one(
            "SELECT COUNT(*) FROM package_installation_plugin WHERE pluginName = ?",
            (plugin_name,),
        )
        return bool(row[0])

    def get_plugin(self, plugin_name: str, package_id: int) -> PluginRow | None:
        row = self.fetch_one(
            """
            SELECT pluginName, className, priority, packageID
            FROM package_installation_plugin
            WHERE pluginName = ? AND packageID = ?
            """,
            (plugin_name, package_id),
        )
        return PluginRow.from_row(row) if row is not None else None

    def list_plugins(self, package_id: int | None = None) -> list[PluginRow]:
        """Registered plugins ordered by priority (highest first) then name."""
        sql = "SELECT pluginName, className, priority, packageID FROM package_installation_plugin"
        parameters: tuple = ()
        if package_id is not None:
            sql += " WHERE packageID = ?"
            parameters = (package_id,)
        sql += " ORDER BY priority DESC, pluginName"
        return [PluginRow.from_row(row) for row in self.fetch_all(sql, parameters)]
