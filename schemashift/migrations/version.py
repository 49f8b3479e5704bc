"""Migration id generation and parsing."""

import re
from datetime import datetime, timezone
from typing import Optional

from schemashift.exceptions import MigrationLoadError

__all__ = ("TIMESTAMP_FORMAT", "generate_timestamp_id", "parse_migration_id")

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
_ID_PATTERN = re.compile(r"^\d+$")


def generate_timestamp_id(now: "Optional[datetime]" = None) -> int:
    """Return a migration id derived from the current UTC time.

    Args:
        now: Moment to derive the id from. Defaults to the current time.

    Returns:
        Integer of the form ``YYYYMMDDHHMMSS``.
    """
    moment = now or datetime.now(timezone.utc)
    return int(moment.strftime(TIMESTAMP_FORMAT))


def parse_migration_id(value: str) -> int:
    """Parse the id part of a migration source name.

    Raises:
        MigrationLoadError: If ``value`` is not a non-negative integer.
    """
    if not _ID_PATTERN.match(value):
        msg = f"Invalid migration id {value!r}: expected digits"
        raise MigrationLoadError(msg)
    return int(value)
