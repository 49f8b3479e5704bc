"""In-process migration store.

Migrations are supplied directly and their actions are callables receiving the
database's ``state`` dictionary. An up action that returns ``False`` reports a
failed migration. The :class:`MemoryDatabase` plays the part of the durable
target: share one instance between runs to keep the completed-id record.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Optional

from schemashift.exceptions import MigrationExistsError, StoreConnectionError
from schemashift.migrations.models import Migration
from schemashift.migrations.version import generate_timestamp_id
from schemashift.utils.logging import get_logger
from schemashift.utils.text import slugify

__all__ = ("MemoryDatabase", "MemoryStore", "memory_store_factory")

logger = get_logger("stores.memory")

MigrationAction = Callable[[dict[str, Any]], Any]


def _noop(_state: "dict[str, Any]") -> None:
    return None


class MemoryDatabase:
    """Durable side of the in-memory store."""

    def __init__(
        self,
        migrations: "Iterable[Migration]" = (),
        completed_ids: "Iterable[int]" = (),
        init_action: "Optional[MigrationAction]" = None,
    ) -> None:
        self.migrations: list[Migration] = list(migrations)
        self.completed: set[int] = set(completed_ids)
        self.init_action = init_action
        self.state: dict[str, Any] = {}
        self.connections_opened = 0
        self.connections_closed = 0

    @property
    def open_connections(self) -> int:
        return self.connections_opened - self.connections_closed


class MemoryStore:
    """Store backed by a :class:`MemoryDatabase`."""

    def __init__(self, database: "Optional[MemoryDatabase]" = None) -> None:
        self.database = database or MemoryDatabase()
        self.connected = False

    def connect(self) -> None:
        if self.connected:
            msg = "MemoryStore is already connected"
            raise StoreConnectionError(msg)
        self.connected = True
        self.database.connections_opened += 1

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.connected = False
        self.database.connections_closed += 1

    def migrations(self) -> "list[Migration]":
        return list(self.database.migrations)

    def completed_ids(self) -> "set[int]":
        return set(self.database.completed)

    def apply_up(self, migration: Migration) -> bool:
        action = migration.up or _noop
        if action(self.database.state) is False:
            logger.debug("Up action for %s reported failure", migration.display_name)
            return False
        self.database.completed.add(migration.id)
        return True

    def apply_down(self, migration: Migration) -> None:
        action = migration.down or _noop
        action(self.database.state)
        self.database.completed.discard(migration.id)

    def init(self, name: "Optional[str]" = None) -> None:
        if self.database.init_action is not None:
            self.database.init_action(self.database.state)
        self.database.state["initialized"] = True

    def create(self, name: "Optional[str]" = None) -> Migration:
        migration_id = generate_timestamp_id()
        if any(existing.id == migration_id for existing in self.database.migrations):
            msg = f"Migration {migration_id} already exists"
            raise MigrationExistsError(msg)
        slug = slugify(name or "migration") or "migration"
        migration = Migration(id=migration_id, name=slug, up=_noop, down=_noop)
        self.database.migrations.append(migration)
        return migration

    def destroy(self, name: "Optional[str]" = None) -> None:
        if not name:
            return
        self.database.migrations = [migration for migration in self.database.migrations if migration.name != name]


def memory_store_factory(config: "Mapping[str, Any]") -> MemoryStore:
    """Build a :class:`MemoryStore`.

    Uses ``config["memory_database"]`` when given, otherwise a fresh database
    seeded from ``migrations``, ``completed_ids`` and ``init_action``.
    """
    database = config.get("memory_database")
    if database is None:
        database = MemoryDatabase(
            migrations=config.get("migrations", ()),
            completed_ids=config.get("completed_ids", ()),
            init_action=config.get("init_action"),
        )
    return MemoryStore(database)
