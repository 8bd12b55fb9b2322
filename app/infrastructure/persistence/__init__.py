"""Key-value persistence for shared command state.

Usage:
    from infrastructure.persistence import create_kv_store

    store = create_kv_store(settings)
    store.set("some_key", {"a": 1}, ttl_seconds=60)
"""

from infrastructure.persistence.factory import create_kv_store
from infrastructure.persistence.store import (
    InMemoryKeyValueStore,
    KeyValueStore,
    StoreError,
)

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "StoreError",
    "create_kv_store",
]
