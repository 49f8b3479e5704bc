"""Unit tests for the Migration value type and run outcomes."""

import dataclasses
from datetime import datetime, timezone

import pytest

from schemashift.exceptions import MigrationLoadError
from schemashift.migrations.models import DownOutcome, Migration, UpOutcome
from schemashift.migrations.version import generate_timestamp_id, parse_migration_id

pytestmark = pytest.mark.xdist_group("migrations")


def test_display_name_joins_id_and_name() -> None:
    migration = Migration(id=20240101120000, name="create-users")

    assert migration.display_name == "20240101120000-create-users"
    assert str(migration) == "20240101120000-create-users"


def test_identity_and_ordering_use_id_only() -> None:
    first = Migration(id=1, name="a", up=lambda _: None)
    same_id = Migration(id=1, name="b")
    second = Migration(id=2, name="a")

    assert first == same_id
    assert hash(first) == hash(same_id)
    assert first < second
    assert sorted([second, first]) == [first, second]


def test_migration_is_immutable() -> None:
    migration = Migration(id=1, name="a")

    with pytest.raises(dataclasses.FrozenInstanceError):
        migration.name = "b"  # type: ignore[misc]


def test_up_outcome_success_and_failure() -> None:
    applied = (Migration(id=1, name="a"),)

    assert UpOutcome.empty().succeeded
    assert UpOutcome(applied=applied).applied_ids == [1]

    failed = UpOutcome(applied=applied, failed=Migration(id=2, name="b"))
    assert not failed.succeeded


def test_down_outcome_ids() -> None:
    outcome = DownOutcome(reverted=(Migration(id=2, name="b"), Migration(id=1, name="a")))

    assert outcome.reverted_ids == [2, 1]
    assert DownOutcome.empty().reverted == ()


def test_generate_timestamp_id_uses_utc_timestamp() -> None:
    moment = datetime(2024, 3, 5, 7, 8, 9, tzinfo=timezone.utc)

    assert generate_timestamp_id(moment) == 20240305070809


def test_parse_migration_id() -> None:
    assert parse_migration_id("0042") == 42

    with pytest.raises(MigrationLoadError, match="Invalid migration id"):
        parse_migration_id("4a")
