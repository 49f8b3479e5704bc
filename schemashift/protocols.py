"""Runtime-checkable protocols for the collaborators a migration run talks to.

Stores and observers are plain objects that satisfy these protocols. Nothing
needs to inherit from them.
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

if TYPE_CHECKING:
    from schemashift.migrations.models import Migration

__all__ = ("MigrationObserver", "MigrationStore")


@runtime_checkable
class MigrationStore(Protocol):
    """Persistence and execution primitives for one migration source.

    ``connect`` and ``disconnect`` bracket exactly one command run. A
    successful ``apply_up`` records the migration id as completed before
    returning and a successful ``apply_down`` removes it.
    """

    def connect(self) -> None:
        """Open the connection used for the run."""
        ...

    def disconnect(self) -> None:
        """Release the connection opened by :meth:`connect`."""
        ...

    def migrations(self) -> "Iterable[Migration]":
        """Return every known migration."""
        ...

    def completed_ids(self) -> "Iterable[int]":
        """Return the ids of migrations whose up action has finished."""
        ...

    def apply_up(self, migration: "Migration") -> bool:
        """Apply a migration. Returns False when the migration failed."""
        ...

    def apply_down(self, migration: "Migration") -> None:
        """Revert a migration. Failures raise."""
        ...

    def init(self, name: "Optional[str]" = None) -> None:
        """Bootstrap the target store."""
        ...

    def create(self, name: "Optional[str]" = None) -> "Migration":
        """Scaffold a new, empty migration."""
        ...

    def destroy(self, name: "Optional[str]" = None) -> None:
        """Remove the migration sources matching ``name``."""
        ...


@runtime_checkable
class MigrationObserver(Protocol):
    """Sink for the events emitted while a command runs."""

    def starting(self) -> None: ...

    def ending(self) -> None: ...

    def running_up(self, ids: "Sequence[int]") -> None: ...

    def applying_up(self, migration: "Migration") -> None: ...

    def up_failed(self, migration: "Migration") -> None: ...

    def running_down(self, ids: "Sequence[int]") -> None: ...

    def applying_down(self, migration: "Migration") -> None: ...
