"""Unit tests for loading SQL migration files."""

from pathlib import Path

import pytest

from schemashift.exceptions import DuplicateMigrationError, MigrationLoadError
from schemashift.stores.loader import load_migrations, split_statements


def _write(directory: Path, name: str, content: str) -> None:
    (directory / name).write_text(content, encoding="utf-8")


def test_split_statements_on_separator_lines() -> None:
    content = "CREATE TABLE a (id INTEGER);\n--;;\n\nCREATE TABLE b (id INTEGER);\n  --;;  \n"

    assert split_statements(content) == ("CREATE TABLE a (id INTEGER);", "CREATE TABLE b (id INTEGER);")


def test_split_statements_single_statement() -> None:
    assert split_statements("DROP TABLE a;\n") == ("DROP TABLE a;",)
    assert split_statements("  \n") == ()


def test_load_migrations_pairs_up_and_down(tmp_path: Path) -> None:
    _write(tmp_path, "20240102000000-add-posts.up.sql", "CREATE TABLE posts (id INTEGER);")
    _write(tmp_path, "20240101000000-add-users.up.sql", "CREATE TABLE users (id INTEGER);")
    _write(tmp_path, "20240101000000-add-users.down.sql", "DROP TABLE users;")
    _write(tmp_path, "init.sql", "CREATE TABLE ignored (id INTEGER);")
    _write(tmp_path, "README.md", "not a migration")

    migrations = load_migrations(tmp_path)

    assert [migration.display_name for migration in migrations] == [
        "20240101000000-add-users",
        "20240102000000-add-posts",
    ]
    assert migrations[0].up == ("CREATE TABLE users (id INTEGER);",)
    assert migrations[0].down == ("DROP TABLE users;",)
    assert migrations[1].down == ()


def test_load_migrations_missing_directory(tmp_path: Path) -> None:
    assert load_migrations(tmp_path / "missing") == []


def test_down_without_up_is_an_error(tmp_path: Path) -> None:
    _write(tmp_path, "1-orphan.down.sql", "DROP TABLE orphan;")

    with pytest.raises(MigrationLoadError, match="no up file"):
        load_migrations(tmp_path)


def test_same_id_with_different_names_is_an_error(tmp_path: Path) -> None:
    _write(tmp_path, "1-first.up.sql", "SELECT 1;")
    _write(tmp_path, "1-second.up.sql", "SELECT 2;")

    with pytest.raises(DuplicateMigrationError):
        load_migrations(tmp_path)
