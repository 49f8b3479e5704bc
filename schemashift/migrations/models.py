"""Migration value types and run outcomes."""

from dataclasses import dataclass, field
from typing import Any, Optional

__all__ = ("DownOutcome", "Migration", "UpOutcome")


@dataclass(frozen=True, order=True)
class Migration:
    """One reversible schema change.

    Identity, ordering, and hashing use ``id`` only. ``up`` and ``down`` are
    actions interpreted by the store that owns the migration.
    """

    id: int
    """Totally ordered migration id (usually a ``%Y%m%d%H%M%S`` timestamp)."""
    name: str = field(compare=False)
    """Human readable migration name."""
    up: Any = field(default=None, compare=False, repr=False)
    """Action applied when migrating up."""
    down: Any = field(default=None, compare=False, repr=False)
    """Action applied when migrating down."""

    @property
    def display_name(self) -> str:
        """Return the ``<id>-<name>`` form used in reports."""
        return f"{self.id}-{self.name}"

    def __str__(self) -> str:
        return self.display_name


@dataclass(frozen=True)
class UpOutcome:
    """Result of applying a sequence of migrations upward.

    A failed ``apply_up`` does not raise. It ends the run and is recorded here
    so callers can tell a partial batch from a complete one.
    """

    applied: "tuple[Migration, ...]" = ()
    failed: "Optional[Migration]" = None

    @classmethod
    def empty(cls) -> "UpOutcome":
        return cls()

    @property
    def succeeded(self) -> bool:
        return self.failed is None

    @property
    def applied_ids(self) -> "list[int]":
        return [migration.id for migration in self.applied]


@dataclass(frozen=True)
class DownOutcome:
    """Result of reverting a sequence of migrations."""

    reverted: "tuple[Migration, ...]" = ()

    @classmethod
    def empty(cls) -> "DownOutcome":
        return cls()

    @property
    def reverted_ids(self) -> "list[int]":
        return [migration.id for migration in self.reverted]
