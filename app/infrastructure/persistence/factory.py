"""Factory for creating key-value stores based on configuration."""

from typing import TYPE_CHECKING

from infrastructure.logging import get_module_logger
from infrastructure.persistence.store import InMemoryKeyValueStore, KeyValueStore

if TYPE_CHECKING:
    from infrastructure.configuration import Settings

logger = get_module_logger()


def create_kv_store(settings: "Settings", backend: str | None = None) -> KeyValueStore:
    """Factory to create the key-value store selected by configuration.

    Args:
        settings: Settings instance
        backend: Optional backend override (memory, redis).
                 If None, uses settings.store.backend

    Returns:
        KeyValueStore implementation

    Raises:
        ValueError: If unknown backend specified
    """
    backend = backend or settings.store.backend

    if backend == "memory":
        logger.info("creating_in_memory_kv_store")
        return InMemoryKeyValueStore()

    elif backend == "redis":
        # Imported lazily so the memory backend works without a redis server
        from infrastructure.persistence.redis_store import RedisKeyValueStore

        logger.info(
            "creating_redis_kv_store",
            host=settings.store.redis_host,
            port=settings.store.redis_port,
        )
        return RedisKeyValueStore(
            host=settings.store.redis_host,
            port=settings.store.redis_port,
            db=settings.store.redis_db,
            key_prefix=settings.store.key_prefix,
        )

    else:
        raise ValueError(f"Unknown store backend: {backend}. Supported: memory, redis")
