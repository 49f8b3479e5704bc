"""Configuration keys understood by the built-in stores.

Commands accept any mapping. Only ``store`` is read by the engine itself; the
remaining keys are interpreted by the selected store factory.
"""

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any, TypedDict

from typing_extensions import NotRequired

if TYPE_CHECKING:
    from schemashift.migrations.models import Migration
    from schemashift.stores.memory import MemoryDatabase

__all__ = ("MigrationConfig",)


class MigrationConfig(TypedDict, total=False):
    """Configuration for a migration command."""

    store: str
    """Name of the registered store factory, e.g. ``"sqlite"`` or ``"memory"``."""
    migration_dir: NotRequired[str]
    """Directory holding ``<id>-<name>.up.sql`` / ``.down.sql`` files (sqlite)."""
    database: NotRequired[str]
    """SQLite database path. Defaults to ``":memory:"``."""
    migration_table_name: NotRequired[str]
    """Tracking table name. Defaults to ``schema_migrations``."""
    init_script: NotRequired[str]
    """Script run by ``init``, relative to ``migration_dir``. Defaults to ``init.sql``."""
    init_in_transaction: NotRequired[bool]
    """Run the init script inside a transaction. Defaults to True."""
    connection_config: NotRequired["dict[str, Any]"]
    """Extra keyword arguments for ``sqlite3.connect``."""
    memory_database: NotRequired["MemoryDatabase"]
    """Shared durable state for the memory store."""
    migrations: NotRequired["Iterable[Migration]"]
    """Seed migrations for a fresh memory database."""
    completed_ids: NotRequired["Iterable[int]"]
    """Seed completed ids for a fresh memory database."""
    init_action: NotRequired["Callable[[dict[str, Any]], Any]"]
    """Callable run by the memory store's ``init``."""
