"""Key-value store interface and in-memory implementation.

The command core keeps its shared state (the retry queue document and rate
limit counters) in a simple key-value store with no transactions. Each
logical collection is a single JSON-compatible value under one key.
"""

import copy
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult

logger = get_module_logger()


class StoreError(Exception):
    """Raised when a store backend cannot complete an operation.

    Attributes:
        result: The OperationResult describing the backend failure
    """

    def __init__(self, result: OperationResult):
        super().__init__(result.message)
        self.result = result

    @property
    def is_transient(self) -> bool:
        return self.result.is_transient


class KeyValueStore(Protocol):
    """Storage interface for JSON-compatible values.

    Methods:
        get: Return the value stored under key, or None when absent/expired
        set: Store a value, optionally expiring after ttl_seconds
        delete: Remove a key (no error when absent)

    Implementations raise StoreError when the backend fails, so that a broken
    store is never mistaken for an empty one.
    """

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:
    """Thread-safe in-memory KeyValueStore with per-key expiry.

    Values are deep-copied on the way in and out, so callers never share
    mutable state with the store (matching a serializing backend).

    Suitable for single-process deployments, development, and tests.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._data: Dict[str, Tuple[Any, Optional[float]]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None

            value, expires_at = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._data[key]
                logger.debug("kv_key_expired", key=key)
                return None

            return copy.deepcopy(value)

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        with self._lock:
            expires_at = self._clock() + ttl_seconds if ttl_seconds else None
            self._data[key] = (copy.deepcopy(value), expires_at)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        """List live keys (for diagnostics and tests)."""
        with self._lock:
            now = self._clock()
            return [
                key
                for key, (_, expires_at) in self._data.items()
                if expires_at is None or expires_at > now
            ]
