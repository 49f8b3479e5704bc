from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from schemashift.migrations.models import Migration
from schemashift.stores.memory import MemoryDatabase


class RecordingObserver:
    """Collect run events as ``(event, value)`` tuples."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def starting(self) -> None:
        self.events.append(("starting", None))

    def ending(self) -> None:
        self.events.append(("ending", None))

    def running_up(self, ids: Sequence[int]) -> None:
        self.events.append(("running_up", list(ids)))

    def applying_up(self, migration: Migration) -> None:
        self.events.append(("up", migration.id))

    def up_failed(self, migration: Migration) -> None:
        self.events.append(("up_failed", migration.id))

    def running_down(self, ids: Sequence[int]) -> None:
        self.events.append(("running_down", list(ids)))

    def applying_down(self, migration: Migration) -> None:
        self.events.append(("down", migration.id))

    def names(self) -> list[str]:
        return [event for event, _ in self.events]


def tracked_migration(
    migration_id: int,
    name: str | None = None,
    *,
    fail_up: bool = False,
    down_error: Exception | None = None,
) -> Migration:
    """Build a migration whose actions append to ``state["log"]``."""

    def up(state: dict[str, Any]) -> bool:
        state.setdefault("log", []).append(("up", migration_id))
        return not fail_up

    def down(state: dict[str, Any]) -> None:
        state.setdefault("log", []).append(("down", migration_id))
        if down_error is not None:
            raise down_error

    return Migration(id=migration_id, name=name or f"migration-{migration_id}", up=up, down=down)


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def make_migration() -> Callable[..., Migration]:
    return tracked_migration


@pytest.fixture
def memory_database() -> MemoryDatabase:
    """Three tracked migrations, none completed."""
    return MemoryDatabase(migrations=[tracked_migration(3), tracked_migration(1), tracked_migration(2)])


@pytest.fixture
def memory_config(memory_database: MemoryDatabase) -> dict[str, Any]:
    return {"store": "memory", "memory_database": memory_database}
