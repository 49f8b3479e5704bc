"""Migration command implementations for schemashift.

Each state-changing command builds a fresh store from the configuration,
connects it for exactly one run, selects its target migrations from the
completed-id record, and applies them.
"""

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Optional

from schemashift.migrations.context import run
from schemashift.migrations.models import DownOutcome, UpOutcome
from schemashift.migrations.observers import LoggingObserver
from schemashift.migrations.runner import MigrationRunner
from schemashift.migrations.sequencer import (
    ids_before,
    select_down,
    select_reset,
    select_rollback,
    select_up,
    uncompleted,
)
from schemashift.stores.registry import make_store
from schemashift.utils.logging import correlation_context, get_logger, log_with_context

if TYPE_CHECKING:
    from schemashift.migrations.models import Migration
    from schemashift.protocols import MigrationObserver, MigrationStore

__all__ = (
    "MigrationCommands",
    "create",
    "destroy",
    "down",
    "init",
    "migrate",
    "migrate_until_just_before",
    "pending_list",
    "reset",
    "rollback",
    "up",
)

logger = get_logger("migrations.commands")

Selector = Callable[["MigrationStore", "Sequence[int]"], "list[Migration]"]


def _log_command_summary(
    *,
    command: str,
    status: str,
    duration_ms: int,
    applied_count: "Optional[int]" = None,
    reverted_count: "Optional[int]" = None,
    failed_id: "Optional[int]" = None,
    error: "Optional[BaseException]" = None,
) -> None:
    """Emit a single summary log entry for a migration command."""
    level = logging.ERROR if status == "failed" else logging.INFO
    extra_fields: dict[str, Any] = {"command": command, "status": status, "duration_ms": duration_ms}
    if applied_count is not None:
        extra_fields["applied_count"] = applied_count
    if reverted_count is not None:
        extra_fields["reverted_count"] = reverted_count
    if failed_id is not None:
        extra_fields["failed_id"] = failed_id
    if error is not None:
        extra_fields["error_type"] = type(error).__name__
    log_with_context(logger, level, "migration.command.summary", **extra_fields)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class MigrationCommands:
    """The migration commands bound to one configuration.

    Args:
        config: Mapping whose ``"store"`` key selects the store factory.
        observer: Receives run events. Defaults to :class:`LoggingObserver`.
    """

    __slots__ = ("config", "observer")

    def __init__(self, config: "Mapping[str, Any]", observer: "Optional[MigrationObserver]" = None) -> None:
        self.config = config
        self.observer = observer or LoggingObserver()

    def _make_store(self) -> "MigrationStore":
        return make_store(self.config)

    def _runner(self, store: "MigrationStore") -> MigrationRunner:
        return MigrationRunner(store, self.observer)

    def _run_up(self, command: str, ids: "Sequence[int]", select: "Selector") -> UpOutcome:
        start = time.perf_counter()
        store = self._make_store()

        def body(connected: "MigrationStore", requested: "Sequence[int]") -> UpOutcome:
            return self._runner(connected).run_up(select(connected, requested))

        body.__name__ = command
        with correlation_context():
            try:
                outcome = run(store, ids, body, self.observer)
            except Exception as exc:
                _log_command_summary(command=command, status="failed", duration_ms=_elapsed_ms(start), error=exc)
                raise
            _log_command_summary(
                command=command,
                status="complete" if outcome.succeeded else "stopped",
                duration_ms=_elapsed_ms(start),
                applied_count=len(outcome.applied),
                failed_id=outcome.failed.id if outcome.failed else None,
            )
        return outcome

    def _run_down(self, command: str, ids: "Sequence[int]", select: "Selector") -> DownOutcome:
        start = time.perf_counter()
        store = self._make_store()

        def body(connected: "MigrationStore", requested: "Sequence[int]") -> DownOutcome:
            return self._runner(connected).run_down(select(connected, requested))

        body.__name__ = command
        with correlation_context():
            try:
                outcome = run(store, ids, body, self.observer)
            except Exception as exc:
                _log_command_summary(command=command, status="failed", duration_ms=_elapsed_ms(start), error=exc)
                raise
            _log_command_summary(
                command=command,
                status="complete",
                duration_ms=_elapsed_ms(start),
                reverted_count=len(outcome.reverted),
            )
        return outcome

    def migrate(self) -> UpOutcome:
        """Bring up every migration that is not completed.

        A migration that fails to apply stops the run without raising. Check
        :attr:`UpOutcome.failed` to tell a partial run from a complete one.
        """
        return self._run_up("migrate", (), lambda store, _ids: uncompleted(store))

    def up(self, *ids: int) -> UpOutcome:
        """Bring up the migrations identified by ``ids``.

        Migrations that are already completed are skipped.
        """
        return self._run_up("up", ids, select_up)

    def down(self, *ids: int) -> DownOutcome:
        """Bring down the migrations identified by ``ids``.

        Migrations that are not completed are skipped.
        """
        return self._run_down("down", ids, select_down)

    def rollback(self) -> DownOutcome:
        """Roll back the last migration that was successfully applied."""
        return self._run_down("rollback", (), lambda store, _ids: select_rollback(store))

    def reset(self) -> "tuple[DownOutcome, UpOutcome]":
        """Bring down every completed migration, then bring up every migration."""
        with correlation_context():
            reverted = self._run_down("reset", (), lambda store, _ids: select_reset(store))
            return reverted, self.migrate()

    def init(self, name: "Optional[str]" = None) -> None:
        """Initialize the target store."""
        self._make_store().init(name)

    def create(self, name: "Optional[str]" = None) -> "Migration":
        """Create a new migration stamped with the current date."""
        return self._make_store().create(name)

    def destroy(self, name: "Optional[str]" = None) -> None:
        """Remove the migration called ``name``."""
        self._make_store().destroy(name)

    def pending_list(self) -> str:
        """Describe the migrations that are not completed yet."""
        store = self._make_store()
        try:
            store.connect()
            names = [migration.name for migration in uncompleted(store)]
        finally:
            store.disconnect()
        return f"You have {len(names)} pending migrations:\n" + "\n".join(names)

    def migrate_until_just_before(self, migration_id: int) -> UpOutcome:
        """Run all uncompleted migrations whose id is lower than ``migration_id``.

        Useful for checking a migration against fixture data. Completed
        migrations are left alone and nothing is migrated down.
        """
        with correlation_context():
            store = self._make_store()
            try:
                store.connect()
                target_ids = ids_before(store, migration_id)
            finally:
                store.disconnect()
            return self.up(*target_ids)


def migrate(config: "Mapping[str, Any]", *, observer: "Optional[MigrationObserver]" = None) -> UpOutcome:
    """Bring up any migrations that are not completed."""
    return MigrationCommands(config, observer).migrate()


def up(config: "Mapping[str, Any]", *ids: int, observer: "Optional[MigrationObserver]" = None) -> UpOutcome:
    """Bring up the migrations identified by ``ids``, skipping completed ones."""
    return MigrationCommands(config, observer).up(*ids)


def down(config: "Mapping[str, Any]", *ids: int, observer: "Optional[MigrationObserver]" = None) -> DownOutcome:
    """Bring down the migrations identified by ``ids``, skipping uncompleted ones."""
    return MigrationCommands(config, observer).down(*ids)


def rollback(config: "Mapping[str, Any]", *, observer: "Optional[MigrationObserver]" = None) -> DownOutcome:
    """Roll back the last migration that was successfully applied."""
    return MigrationCommands(config, observer).rollback()


def reset(
    config: "Mapping[str, Any]", *, observer: "Optional[MigrationObserver]" = None
) -> "tuple[DownOutcome, UpOutcome]":
    """Bring down all completed migrations, then bring up all migrations."""
    return MigrationCommands(config, observer).reset()


def init(config: "Mapping[str, Any]", name: "Optional[str]" = None) -> None:
    """Initialize the data store."""
    MigrationCommands(config).init(name)


def create(config: "Mapping[str, Any]", name: "Optional[str]" = None) -> "Migration":
    """Create a new migration with the current date."""
    return MigrationCommands(config).create(name)


def destroy(config: "Mapping[str, Any]", name: "Optional[str]" = None) -> None:
    """Destroy a migration."""
    MigrationCommands(config).destroy(name)


def pending_list(config: "Mapping[str, Any]") -> str:
    """List pending migrations."""
    return MigrationCommands(config).pending_list()


def migrate_until_just_before(
    config: "Mapping[str, Any]", migration_id: int, *, observer: "Optional[MigrationObserver]" = None
) -> UpOutcome:
    """Run all uncompleted migrations preceding ``migration_id``."""
    return MigrationCommands(config, observer).migrate_until_just_before(migration_id)
