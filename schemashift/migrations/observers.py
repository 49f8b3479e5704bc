"""Observers that report migration runs.

:class:`LoggingObserver` writes to the ``schemashift.migrations`` logger and is
the default. :class:`ConsoleObserver` renders the same events with Rich.
"""

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

from rich.console import Console

from schemashift.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from schemashift.migrations.models import Migration

__all__ = ("ConsoleObserver", "LoggingObserver", "NullObserver")


class LoggingObserver:
    """Report run events through the standard logging module."""

    __slots__ = ("logger",)

    def __init__(self, logger: "Optional[logging.Logger]" = None) -> None:
        self.logger = logger or get_logger("migrations")

    def starting(self) -> None:
        self.logger.info("Starting migrations")

    def ending(self) -> None:
        self.logger.info("Ending migrations")

    def running_up(self, ids: "Sequence[int]") -> None:
        self.logger.info("Running up for %s", list(ids))

    def applying_up(self, migration: "Migration") -> None:
        self.logger.info("Up %s", migration.display_name)

    def up_failed(self, migration: "Migration") -> None:
        log_with_context(
            self.logger,
            logging.ERROR,
            f"Stopping: {migration.display_name} failed to migrate",
            migration_id=migration.id,
            migration_name=migration.name,
            status="failed",
        )

    def running_down(self, ids: "Sequence[int]") -> None:
        self.logger.info("Running down for %s", list(ids))

    def applying_down(self, migration: "Migration") -> None:
        self.logger.info("Down %s", migration.display_name)


class ConsoleObserver:
    """Report run events on a Rich console."""

    __slots__ = ("console",)

    def __init__(self, console: "Optional[Console]" = None) -> None:
        self.console = console or Console()

    def starting(self) -> None:
        self.console.rule("[yellow]Starting migrations[/]", align="left")

    def ending(self) -> None:
        self.console.print("[dim]Ending migrations[/]")

    def running_up(self, ids: "Sequence[int]") -> None:
        self.console.print(f"[yellow]Running up for[/] {list(ids)}")

    def applying_up(self, migration: "Migration") -> None:
        self.console.print(f"[cyan]Up[/] {migration.display_name}")

    def up_failed(self, migration: "Migration") -> None:
        self.console.print(f"[red]✗ Stopping: {migration.display_name} failed to migrate[/]")

    def running_down(self, ids: "Sequence[int]") -> None:
        self.console.print(f"[yellow]Running down for[/] {list(ids)}")

    def applying_down(self, migration: "Migration") -> None:
        self.console.print(f"[cyan]Down[/] {migration.display_name}")


class NullObserver:
    """Discard every event."""

    __slots__ = ()

    def starting(self) -> None:
        return

    def ending(self) -> None:
        return

    def running_up(self, ids: "Sequence[int]") -> None:
        return

    def applying_up(self, migration: "Migration") -> None:
        return

    def up_failed(self, migration: "Migration") -> None:
        return

    def running_down(self, ids: "Sequence[int]") -> None:
        return

    def applying_down(self, migration: "Migration") -> None:
        return
