"""Migration execution for schemashift.

The runner applies an already selected sequence of migrations against a
connected store. Selection lives in :mod:`schemashift.migrations.sequencer`.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Optional

from schemashift.migrations.models import DownOutcome, UpOutcome
from schemashift.migrations.observers import LoggingObserver

if TYPE_CHECKING:
    from schemashift.migrations.models import Migration
    from schemashift.protocols import MigrationObserver, MigrationStore

__all__ = ("MigrationRunner",)


class MigrationRunner:
    """Apply migrations up or down against one store."""

    __slots__ = ("observer", "store")

    def __init__(self, store: "MigrationStore", observer: "Optional[MigrationObserver]" = None) -> None:
        self.store = store
        self.observer = observer or LoggingObserver()

    def run_up(self, migrations: "Iterable[Migration]") -> UpOutcome:
        """Apply migrations in ascending id order.

        Stops at the first migration whose ``apply_up`` returns False. That
        failure is reported and returned, not raised, so the remaining
        migrations are never applied on top of a known bad schema.

        Args:
            migrations: Migrations to apply. None of them should be completed.

        Returns:
            The applied migrations and the one that failed, if any.
        """
        ordered = sorted(migrations, key=lambda migration: migration.id)
        if not ordered:
            return UpOutcome.empty()

        self.observer.running_up([migration.id for migration in ordered])
        applied: list[Migration] = []
        for migration in ordered:
            self.observer.applying_up(migration)
            if not self.store.apply_up(migration):
                self.observer.up_failed(migration)
                return UpOutcome(applied=tuple(applied), failed=migration)
            applied.append(migration)
        return UpOutcome(applied=tuple(applied))

    def run_down(self, migrations: "Iterable[Migration]") -> DownOutcome:
        """Revert migrations in descending id order.

        Every migration is reverted. An exception from ``apply_down`` aborts
        the rest of the sequence and propagates.

        Args:
            migrations: Completed migrations to revert.

        Returns:
            The reverted migrations, in the order they were reverted.
        """
        ordered = sorted(migrations, key=lambda migration: migration.id, reverse=True)
        if not ordered:
            return DownOutcome.empty()

        self.observer.running_down([migration.id for migration in ordered])
        for migration in ordered:
            self.observer.applying_down(migration)
            self.store.apply_down(migration)
        return DownOutcome(reverted=tuple(ordered))
