"""Store factory registry.

Stores are selected by the ``"store"`` key of a configuration mapping. Each
name maps to a factory that receives the whole configuration.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from schemashift.exceptions import ImproperConfigurationError
from schemashift.utils.logging import get_logger

if TYPE_CHECKING:
    from schemashift.protocols import MigrationStore

__all__ = ("StoreFactory", "available_stores", "get_store_factory", "make_store", "register_store")

logger = get_logger("stores.registry")

StoreFactory = Callable[[Mapping[str, Any]], "MigrationStore"]

_STORE_FACTORIES: "dict[str, StoreFactory]" = {}


def register_store(name: str, factory: "StoreFactory", *, replace: bool = False) -> None:
    """Register a store factory under ``name``.

    Args:
        name: Value of the ``"store"`` configuration key that selects the factory.
        factory: Callable building a store from the configuration mapping.
        replace: Allow overriding an existing registration.

    Raises:
        ValueError: If ``name`` is already registered and ``replace`` is False.
    """
    if name in _STORE_FACTORIES and not replace:
        msg = f"Store {name!r} is already registered"
        raise ValueError(msg)
    _STORE_FACTORIES[name] = factory
    logger.debug("Registered store factory %s", name)


def get_store_factory(name: str) -> "StoreFactory":
    """Return the factory registered under ``name``.

    Raises:
        ImproperConfigurationError: If no factory is registered under ``name``.
    """
    try:
        return _STORE_FACTORIES[name]
    except KeyError:
        known = ", ".join(sorted(_STORE_FACTORIES)) or "none"
        msg = f"Unknown store {name!r}. Registered stores: {known}"
        raise ImproperConfigurationError(msg) from None


def available_stores() -> "list[str]":
    return sorted(_STORE_FACTORIES)


def make_store(config: "Mapping[str, Any]") -> "MigrationStore":
    """Build the store selected by ``config["store"]``.

    Raises:
        ImproperConfigurationError: If the configuration names no store or an unknown one.
    """
    store_name = config.get("store")
    if not store_name:
        msg = "Store is not configured"
        raise ImproperConfigurationError(msg)
    return get_store_factory(str(store_name))(config)
