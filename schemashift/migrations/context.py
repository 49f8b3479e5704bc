"""Connection lifecycle for a single command run."""

import logging
import time
from collections.abc import Callable, Generator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional, TypeVar

from schemashift.exceptions import BatchStatementError
from schemashift.migrations.observers import LoggingObserver
from schemashift.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from schemashift.protocols import MigrationObserver, MigrationStore

__all__ = ("connected_store", "run")

logger = get_logger("migrations.context")

R = TypeVar("R")
Command = Callable[["MigrationStore", "Sequence[int]"], R]


@contextmanager
def connected_store(
    store: "MigrationStore", observer: "Optional[MigrationObserver]" = None
) -> "Generator[MigrationStore, None, None]":
    """Connect ``store`` for the duration of the block.

    ``disconnect`` runs on every exit path, including a failed ``connect``.
    """
    observer = observer or LoggingObserver()
    observer.starting()
    try:
        store.connect()
        yield store
    finally:
        try:
            observer.ending()
        finally:
            store.disconnect()


def run(
    store: "MigrationStore",
    ids: "Sequence[int]",
    command: "Command[R]",
    observer: "Optional[MigrationObserver]" = None,
) -> R:
    """Run one command body against a connected store.

    A :class:`~schemashift.exceptions.BatchStatementError` is replaced by the
    exception chained to it so the caller sees the statement that failed.

    Args:
        store: Store to connect and pass to ``command``.
        ids: Migration ids forwarded to ``command``.
        command: Callable taking ``(store, ids)``.
        observer: Receives start/end and apply events.

    Returns:
        Whatever ``command`` returns.
    """
    start = time.perf_counter()
    status = "failed"
    try:
        with connected_store(store, observer):
            result = command(store, ids)
    except BatchStatementError as exc:
        root_cause = exc.root_cause
        if root_cause is None:
            raise
        raise root_cause from root_cause.__cause__
    else:
        status = "complete"
        return result
    finally:
        log_with_context(
            logger,
            logging.DEBUG,
            "migration.run",
            command=getattr(command, "__name__", type(command).__name__),
            store=type(store).__name__,
            ids=list(ids),
            status=status,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
