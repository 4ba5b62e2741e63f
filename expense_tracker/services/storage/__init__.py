"""
Storage Services Package

Provides the key-value storage interface, its concrete backends and the
PersistenceGateway that maps expenses and preferences onto keys.
"""

from expense_tracker.services.storage.interface import KeyValueStoreInterface
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore
from expense_tracker.services.storage.memory import InMemoryKeyValueStore
from expense_tracker.services.storage.gateway import (
    PersistenceGateway,
    create_key_value_store,
    format_budget,
)

__all__ = [
    # Interface
    "KeyValueStoreInterface",
    # Backends
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Gateway
    "PersistenceGateway",
    "create_key_value_store",
    "format_budget",
]
