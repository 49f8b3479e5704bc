"""schemashift: ordered, reversible schema migrations on top of pluggable stores."""

from schemashift import exceptions, migrations, stores
from schemashift.__metadata__ import __version__
from schemashift.config import MigrationConfig
from schemashift.exceptions import (
    BatchStatementError,
    ImproperConfigurationError,
    SchemaShiftError,
    StoreConnectionError,
)
from schemashift.migrations import (
    DownOutcome,
    Migration,
    MigrationCommands,
    UpOutcome,
    create,
    destroy,
    down,
    init,
    migrate,
    migrate_until_just_before,
    pending_list,
    reset,
    rollback,
    up,
)
from schemashift.protocols import MigrationObserver, MigrationStore
from schemashift.stores import make_store, register_store

__all__ = (
    "BatchStatementError",
    "DownOutcome",
    "ImproperConfigurationError",
    "Migration",
    "MigrationCommands",
    "MigrationConfig",
    "MigrationObserver",
    "MigrationStore",
    "SchemaShiftError",
    "StoreConnectionError",
    "UpOutcome",
    "__version__",
    "create",
    "destroy",
    "down",
    "exceptions",
    "init",
    "make_store",
    "migrate",
    "migrate_until_just_before",
    "migrations",
    "pending_list",
    "register_store",
    "reset",
    "rollback",
    "stores",
    "up",
)
