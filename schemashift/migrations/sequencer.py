"""Select the migrations a command acts on.

Every selection is recomputed from the store's migration inventory and its
completed-id record. Nothing is cached between runs.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from schemashift.exceptions import DuplicateMigrationError

if TYPE_CHECKING:
    from schemashift.migrations.models import Migration
    from schemashift.protocols import MigrationStore

__all__ = (
    "ids_before",
    "index_migrations",
    "select_down",
    "select_reset",
    "select_rollback",
    "select_up",
    "uncompleted",
)


def index_migrations(store: "MigrationStore") -> "dict[int, Migration]":
    """Map migration ids to migrations.

    Raises:
        DuplicateMigrationError: If two migrations share an id.
    """
    index: dict[int, Migration] = {}
    for migration in store.migrations():
        if migration.id in index:
            raise DuplicateMigrationError(migration.id)
        index[migration.id] = migration
    return index


def uncompleted(store: "MigrationStore") -> "list[Migration]":
    """Return migrations that are not completed, ascending by id."""
    completed = set(store.completed_ids())
    return sorted(
        (migration for migration in index_migrations(store).values() if migration.id not in completed),
        key=lambda migration: migration.id,
    )


def select_up(store: "MigrationStore", ids: "Iterable[int]") -> "list[Migration]":
    """Return the requested migrations that still need to be applied, ascending.

    Requested ids that are already completed or unknown are skipped.
    """
    requested = set(ids) - set(store.completed_ids())
    index = index_migrations(store)
    return [index[migration_id] for migration_id in sorted(requested) if migration_id in index]


def select_down(store: "MigrationStore", ids: "Iterable[int]") -> "list[Migration]":
    """Return the requested migrations that are completed, descending.

    Requested ids that are not completed or unknown are skipped.
    """
    requested = set(ids) & set(store.completed_ids())
    index = index_migrations(store)
    return [index[migration_id] for migration_id in sorted(requested, reverse=True) if migration_id in index]


def select_rollback(store: "MigrationStore") -> "list[Migration]":
    """Return the most recently completed migration, or nothing."""
    completed = list(store.completed_ids())
    if not completed:
        return []
    return select_down(store, [max(completed)])


def select_reset(store: "MigrationStore") -> "list[Migration]":
    """Return every completed migration in the order the down path applies them."""
    return select_down(store, sorted(store.completed_ids()))


def ids_before(store: "MigrationStore", target_id: int) -> "list[int]":
    """Return uncompleted ids strictly less than ``target_id``, ascending."""
    return sorted({migration.id for migration in uncompleted(store) if migration.id < target_id})
