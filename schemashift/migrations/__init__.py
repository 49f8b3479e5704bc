"""Migration engine for schemashift.

Selects the migrations a command acts on from a store's completed-id record
and applies them in id order.
"""

from schemashift.migrations.commands import (
    MigrationCommands,
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
from schemashift.migrations.context import connected_store, run
from schemashift.migrations.models import DownOutcome, Migration, UpOutcome
from schemashift.migrations.observers import ConsoleObserver, LoggingObserver, NullObserver
from schemashift.migrations.runner import MigrationRunner

__all__ = (
    "ConsoleObserver",
    "DownOutcome",
    "LoggingObserver",
    "Migration",
    "MigrationCommands",
    "MigrationRunner",
    "NullObserver",
    "UpOutcome",
    "connected_store",
    "create",
    "destroy",
    "down",
    "init",
    "migrate",
    "migrate_until_just_before",
    "pending_list",
    "reset",
    "rollback",
    "run",
    "up",
)
