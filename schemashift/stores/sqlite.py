"""SQLite migration store.

Migrations are read from SQL files (see :mod:`schemashift.stores.loader`) and
completed ids are kept in a tracking table in the target database. Each
migration runs in its own transaction together with the tracking-table write.
"""

import re
import sqlite3
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from schemashift.exceptions import (
    BatchStatementError,
    ImproperConfigurationError,
    MigrationExistsError,
    StoreConnectionError,
)
from schemashift.migrations.models import Migration
from schemashift.migrations.version import generate_timestamp_id
from schemashift.stores.loader import load_migrations
from schemashift.utils.logging import get_logger
from schemashift.utils.text import slugify

__all__ = ("DEFAULT_TABLE_NAME", "SqliteStore", "sqlite_store_factory")

logger = get_logger("stores.sqlite")

DEFAULT_TABLE_NAME = "schema_migrations"
DEFAULT_INIT_SCRIPT = "init.sql"
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SqliteStore:
    """Store backed by a SQLite database and a directory of SQL migrations."""

    def __init__(
        self,
        database: "Union[str, Path]",
        migration_dir: "Union[str, Path]",
        *,
        table_name: str = DEFAULT_TABLE_NAME,
        init_script: str = DEFAULT_INIT_SCRIPT,
        init_in_transaction: bool = True,
        connection_config: "Optional[dict[str, Any]]" = None,
    ) -> None:
        if not _IDENTIFIER_PATTERN.match(table_name):
            msg = f"Invalid migration table name: {table_name!r}"
            raise ImproperConfigurationError(msg)
        self.database = str(database)
        self.migration_dir = Path(migration_dir)
        self.table_name = table_name
        self.init_script = init_script
        self.init_in_transaction = init_in_transaction
        self.connection_config = dict(connection_config or {})
        self.connection: Optional[sqlite3.Connection] = None

    def _open(self) -> sqlite3.Connection:
        try:
            connection = sqlite3.connect(self.database, isolation_level=None, **self.connection_config)
        except sqlite3.Error as exc:
            msg = f"Failed to connect to {self.database}: {exc}"
            raise StoreConnectionError(msg) from exc
        connection.row_factory = sqlite3.Row
        return connection

    def _require_connection(self) -> sqlite3.Connection:
        if self.connection is None:
            msg = "SqliteStore is not connected"
            raise StoreConnectionError(msg)
        return self.connection

    def _ensure_tracking_table(self, connection: sqlite3.Connection) -> None:
        connection.execute(
            f"CREATE TABLE IF NOT EXISTS {self.table_name} ("
            "id INTEGER PRIMARY KEY, applied TEXT NOT NULL, description TEXT)"
        )

    def connect(self) -> None:
        if self.connection is not None:
            msg = "SqliteStore is already connected"
            raise StoreConnectionError(msg)
        connection = self._open()
        try:
            self._ensure_tracking_table(connection)
        except sqlite3.Error as exc:
            connection.close()
            msg = f"Failed to prepare tracking table {self.table_name}: {exc}"
            raise StoreConnectionError(msg) from exc
        self.connection = connection
        logger.debug("Connected to %s", self.database)

    def disconnect(self) -> None:
        if self.connection is None:
            return
        connection, self.connection = self.connection, None
        try:
            connection.close()
        except sqlite3.Error as exc:
            msg = f"Failed to close connection to {self.database}: {exc}"
            raise StoreConnectionError(msg) from exc
        logger.debug("Disconnected from %s", self.database)

    def migrations(self) -> "list[Migration]":
        return load_migrations(self.migration_dir)

    def completed_ids(self) -> "list[int]":
        cursor = self._require_connection().execute(f"SELECT id FROM {self.table_name} ORDER BY id")
        return [row["id"] for row in cursor.fetchall()]

    def _execute(self, connection: sqlite3.Connection, statements: "Sequence[str]") -> None:
        total = len(statements)
        for index, statement in enumerate(statements):
            try:
                connection.execute(statement)
            except sqlite3.Error as exc:
                if total > 1:
                    msg = f"Statement {index + 1} of {total} failed: {exc}"
                    raise BatchStatementError(msg, statement_index=index) from exc
                raise

    def _run_in_transaction(
        self, migration: Migration, statements: "Sequence[str]", record_sql: str, record_params: "tuple[Any, ...]"
    ) -> None:
        connection = self._require_connection()
        connection.execute("BEGIN")
        try:
            self._execute(connection, statements)
            connection.execute(record_sql, record_params)
            connection.execute("COMMIT")
        except Exception:
            if connection.in_transaction:
                connection.execute("ROLLBACK")
            raise
        logger.debug("Committed %s", migration.display_name)

    def apply_up(self, migration: Migration) -> bool:
        """Apply ``migration`` and record it.

        Any statement failure rolls the migration back and returns False.
        """
        try:
            self._run_in_transaction(
                migration,
                migration.up or (),
                f"INSERT INTO {self.table_name} (id, applied, description) VALUES (?, ?, ?)",
                (migration.id, datetime.now(timezone.utc).isoformat(), migration.name),
            )
        except (sqlite3.Error, BatchStatementError):
            logger.exception("Migration %s failed to apply", migration.display_name)
            return False
        return True

    def apply_down(self, migration: Migration) -> None:
        """Revert ``migration`` and remove its record.

        Raises:
            BatchStatementError: If one statement of a multi-statement script fails.
            sqlite3.Error: If a single-statement script fails.
        """
        self._run_in_transaction(
            migration, migration.down or (), f"DELETE FROM {self.table_name} WHERE id = ?", (migration.id,)
        )

    def init(self, name: "Optional[str]" = None) -> None:
        """Create the tracking table and run the init script, if there is one."""
        script_path = self.migration_dir / (name or self.init_script)
        connection = self._open()
        try:
            self._ensure_tracking_table(connection)
            if not script_path.is_file():
                logger.info("No init script found at %s", script_path)
                return
            script = script_path.read_text(encoding="utf-8")
            if self.init_in_transaction:
                script = f"BEGIN;\n{script}\nCOMMIT;"
            try:
                connection.executescript(script)
            except sqlite3.Error:
                if connection.in_transaction:
                    connection.execute("ROLLBACK")
                raise
            logger.info("Ran init script %s", script_path)
        finally:
            connection.close()

    def _paths_for(self, migration_id: int, name: str) -> "tuple[Path, Path]":
        stem = f"{migration_id}-{name}"
        return self.migration_dir / f"{stem}.up.sql", self.migration_dir / f"{stem}.down.sql"

    def create(self, name: "Optional[str]" = None) -> Migration:
        """Write empty up and down files for a new migration."""
        slug = slugify(name or "migration") or "migration"
        migration_id = generate_timestamp_id()
        up_path, down_path = self._paths_for(migration_id, slug)
        if up_path.exists() or down_path.exists():
            msg = f"Migration {migration_id}-{slug} already exists"
            raise MigrationExistsError(msg)
        self.migration_dir.mkdir(parents=True, exist_ok=True)
        up_path.write_text(f"-- {migration_id}-{slug} up\n", encoding="utf-8")
        down_path.write_text(f"-- {migration_id}-{slug} down\n", encoding="utf-8")
        logger.info("Created migration %s-%s", migration_id, slug)
        return Migration(id=migration_id, name=slug)

    def destroy(self, name: "Optional[str]" = None) -> None:
        """Delete the up and down files of every migration called ``name``."""
        if not name:
            logger.warning("No migration name given, nothing to destroy")
            return
        names = {name, slugify(name)}
        removed = [
            path
            for migration in self.migrations()
            if migration.name in names
            for path in self._paths_for(migration.id, migration.name)
            if path.exists()
        ]
        if not removed:
            logger.warning("No migration named %s found in %s", name, self.migration_dir)
        for path in removed:
            path.unlink()
            logger.info("Removed %s", path)


def sqlite_store_factory(config: "Mapping[str, Any]") -> SqliteStore:
    """Build a :class:`SqliteStore` from a configuration mapping.

    Raises:
        ImproperConfigurationError: If ``migration_dir`` is missing.
    """
    migration_dir = config.get("migration_dir")
    if not migration_dir:
        msg = "The sqlite store requires 'migration_dir'"
        raise ImproperConfigurationError(msg)
    return SqliteStore(
        config.get("database", ":memory:"),
        migration_dir,
        table_name=config.get("migration_table_name", DEFAULT_TABLE_NAME),
        init_script=config.get("init_script", DEFAULT_INIT_SCRIPT),
        init_in_transaction=config.get("init_in_transaction", True),
        connection_config=config.get("connection_config"),
    )
