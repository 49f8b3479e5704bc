from typing import Any, Optional

__all__ = (
    "BatchStatementError",
    "DuplicateMigrationError",
    "ImproperConfigurationError",
    "MigrationError",
    "MigrationExistsError",
    "MigrationLoadError",
    "SchemaShiftError",
    "StoreConnectionError",
)


class SchemaShiftError(Exception):
    """Base exception class from which all schemashift exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SchemaShiftError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SchemaShiftError):
    """Improper Configuration error.

    Raised when no store can be resolved from the configuration value.
    """


class StoreConnectionError(SchemaShiftError):
    """A store failed to open or close its connection."""


class MigrationError(SchemaShiftError):
    """Base class for errors raised while handling migrations."""


class MigrationLoadError(MigrationError):
    """A migration source could not be read or parsed."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues loading migration source."
        super().__init__(message)


class DuplicateMigrationError(MigrationError):
    """Two migrations share the same id."""

    migration_id: int

    def __init__(self, migration_id: int) -> None:
        super().__init__(f"Duplicate migration id: {migration_id}")
        self.migration_id = migration_id


class MigrationExistsError(MigrationError):
    """Creating a migration would overwrite an existing one."""


class BatchStatementError(MigrationError):
    """A multi-statement apply failed.

    The failing statement's error is chained as ``__cause__`` and exposed as
    :attr:`root_cause`. Command runs re-raise the root cause in place of this
    wrapper.
    """

    statement_index: Optional[int]

    def __init__(self, message: Optional[str] = None, statement_index: Optional[int] = None) -> None:
        if message is None:
            message = "A statement in the batch failed."
        super().__init__(message)
        self.statement_index = statement_index

    @property
    def root_cause(self) -> Optional[BaseException]:
        """Return the chained exception that caused the batch to fail."""
        return self.__cause__
