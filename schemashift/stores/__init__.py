"""Built-in migration stores and the registry that selects them."""

from schemashift.stores.memory import MemoryDatabase, MemoryStore, memory_store_factory
from schemashift.stores.registry import available_stores, get_store_factory, make_store, register_store
from schemashift.stores.sqlite import SqliteStore, sqlite_store_factory

register_store("memory", memory_store_factory, replace=True)
register_store("sqlite", sqlite_store_factory, replace=True)

__all__ = (
    "MemoryDatabase",
    "MemoryStore",
    "SqliteStore",
    "available_stores",
    "get_store_factory",
    "make_store",
    "memory_store_factory",
    "register_store",
    "sqlite_store_factory",
)
