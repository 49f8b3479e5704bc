"""Unit tests for the store factory registry."""

from collections.abc import Iterator, Mapping
from typing import Any

import pytest

from schemashift.exceptions import ImproperConfigurationError
from schemashift.protocols import MigrationStore
from schemashift.stores import MemoryStore, SqliteStore
from schemashift.stores import registry
from schemashift.stores.registry import available_stores, get_store_factory, make_store, register_store


@pytest.fixture
def clean_registry() -> "Iterator[None]":
    saved = dict(registry._STORE_FACTORIES)
    yield
    registry._STORE_FACTORIES.clear()
    registry._STORE_FACTORIES.update(saved)


def test_builtin_stores_are_registered() -> None:
    assert {"memory", "sqlite"} <= set(available_stores())


def test_make_store_builds_memory_store() -> None:
    store = make_store({"store": "memory"})

    assert isinstance(store, MemoryStore)
    assert isinstance(store, MigrationStore)


def test_make_store_builds_sqlite_store(tmp_path: Any) -> None:
    store = make_store({"store": "sqlite", "migration_dir": str(tmp_path), "database": str(tmp_path / "db.sqlite")})

    assert isinstance(store, SqliteStore)
    assert isinstance(store, MigrationStore)


@pytest.mark.parametrize("config", [{}, {"store": ""}, {"store": None}])
def test_make_store_requires_store_key(config: "dict[str, Any]") -> None:
    with pytest.raises(ImproperConfigurationError, match="Store is not configured"):
        make_store(config)


def test_get_store_factory_unknown_name() -> None:
    with pytest.raises(ImproperConfigurationError, match="Registered stores"):
        get_store_factory("oracle")


@pytest.mark.usefixtures("clean_registry")
def test_register_custom_store() -> None:
    built: list[Mapping[str, Any]] = []

    def factory(config: "Mapping[str, Any]") -> MemoryStore:
        built.append(config)
        return MemoryStore()

    register_store("custom", factory)
    config = {"store": "custom", "anything": 1}

    assert isinstance(make_store(config), MemoryStore)
    assert built == [config]


@pytest.mark.usefixtures("clean_registry")
def test_register_store_refuses_silent_override() -> None:
    with pytest.raises(ValueError, match="already registered"):
        register_store("memory", lambda _config: MemoryStore())

    register_store("memory", lambda _config: MemoryStore(), replace=True)
