"""Load migrations from a directory of SQL files.

Each migration is a pair of files named ``<id>-<name>.up.sql`` and
``<id>-<name>.down.sql``. The down file is optional. Statements inside a file
are separated by a line containing only ``--;;`` and each chunk must hold a
single statement.
"""

import re
from pathlib import Path
from typing import Union

from schemashift.exceptions import DuplicateMigrationError, MigrationLoadError
from schemashift.migrations.models import Migration
from schemashift.migrations.version import parse_migration_id
from schemashift.utils.logging import get_logger

__all__ = ("MIGRATION_FILE_PATTERN", "STATEMENT_SEPARATOR", "load_migrations", "split_statements")

logger = get_logger("stores.loader")

MIGRATION_FILE_PATTERN = re.compile(r"^(?P<id>\d+)-(?P<name>[^.]+)\.(?P<direction>up|down)\.sql$")
STATEMENT_SEPARATOR = re.compile(r"^\s*--;;\s*$", re.MULTILINE)


def split_statements(content: str) -> "tuple[str, ...]":
    """Split a migration file into its non-empty statements."""
    return tuple(chunk.strip() for chunk in STATEMENT_SEPARATOR.split(content) if chunk.strip())


def load_migrations(migration_dir: "Union[str, Path]") -> "list[Migration]":
    """Load every migration found in ``migration_dir``.

    Files that don't match the naming pattern are ignored. A missing directory
    yields no migrations.

    Args:
        migration_dir: Directory holding the ``.sql`` migration files.

    Raises:
        MigrationLoadError: If a file can't be read or a down file has no up file.
        DuplicateMigrationError: If two migrations with different names share an id.

    Returns:
        Migrations sorted by id.
    """
    directory = Path(migration_dir)
    if not directory.is_dir():
        logger.debug("Migration directory %s does not exist", directory)
        return []

    sources: dict[int, dict[str, str]] = {}
    names: dict[int, str] = {}
    for path in sorted(directory.iterdir()):
        match = MIGRATION_FILE_PATTERN.match(path.name)
        if match is None or not path.is_file():
            continue
        migration_id = parse_migration_id(match.group("id"))
        name = match.group("name")
        if names.setdefault(migration_id, name) != name:
            raise DuplicateMigrationError(migration_id)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Failed to read migration file {path}: {exc}"
            raise MigrationLoadError(msg) from exc
        sources.setdefault(migration_id, {})[match.group("direction")] = content

    migrations = []
    for migration_id in sorted(sources):
        parts = sources[migration_id]
        if "up" not in parts:
            msg = f"Migration {migration_id}-{names[migration_id]} has a down file but no up file"
            raise MigrationLoadError(msg)
        migrations.append(
            Migration(
                id=migration_id,
                name=names[migration_id],
                up=split_statements(parts["up"]),
                down=split_statements(parts.get("down", "")),
            )
        )
    return migrations
