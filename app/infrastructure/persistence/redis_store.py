"""Redis/Valkey-backed KeyValueStore.

Values are JSON-serialized; TTLs are applied with SETEX so rate limit
counters expire on the server side without explicit deletion.

Usage:
    from infrastructure.persistence.redis_store import RedisKeyValueStore

    store = RedisKeyValueStore(host="localhost", port=6379)
    store.set("rate_limit:save_settings:42", {"window": 1, "count": 3}, ttl_seconds=120)
"""

import json
from typing import Any, Optional

from redis import ConnectionPool, Redis, RedisError  # type: ignore

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult, classify_redis_error
from infrastructure.persistence.store import StoreError

logger = get_module_logger()


class RedisKeyValueStore:
    """KeyValueStore backed by a Redis connection pool.

    Args:
        host: Redis host
        port: Redis port
        db: Database index
        key_prefix: Prefix prepended to every key
        client: Optional pre-built Redis client (tests, shared pools)
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        key_prefix: str = "",
        client: Optional[Redis] = None,
    ):
        self.key_prefix = key_prefix
        if client is not None:
            self._client = client
        else:
            pool = ConnectionPool(
                host=host,
                port=port,
                db=db,
                decode_responses=True,
                max_connections=10,
                socket_timeout=5,
                socket_connect_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            self._client = Redis(connection_pool=pool)
            logger.info("redis_connection_pool_created", host=host, port=port, db=db)

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}:{key}" if self.key_prefix else key

    def get(self, key: str) -> Optional[Any]:
        return self._unwrap(self._get_value(self._make_key(key)))

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        self._unwrap(self._set_value(self._make_key(key), value, ttl_seconds))

    def delete(self, key: str) -> None:
        full_key = self._make_key(key)
        try:
            self._client.delete(full_key)
        except RedisError as e:
            self._unwrap(classify_redis_error(e, key=full_key, operation="delete"))
        logger.debug("redis_delete", key=full_key)

    @staticmethod
    def _unwrap(result: OperationResult) -> Any:
        if not result.is_success:
            logger.error(
                "redis_operation_failed", error=result.message, **result.log_fields()
            )
            raise StoreError(result)
        return result.data

    def _set_value(
        self, key: str, value: Any, ttl_seconds: Optional[int]
    ) -> OperationResult:
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            return OperationResult.permanent_error(
                f"Value is not JSON serializable: {e}",
                error_code="SERIALIZATION_ERROR",
                key=key,
            )

        try:
            if ttl_seconds:
                self._client.setex(key, ttl_seconds, serialized)
            else:
                self._client.set(key, serialized)
        except RedisError as e:
            return classify_redis_error(e, key=key, operation="set")

        logger.debug("redis_set", key=key, ttl_seconds=ttl_seconds)
        return OperationResult.success(key=key)

    def _get_value(self, key: str) -> OperationResult:
        try:
            raw = self._client.get(key)
        except RedisError as e:
            return classify_redis_error(e, key=key, operation="get")

        if raw is None:
            return OperationResult.success(message="not found", key=key)

        try:
            return OperationResult.success(data=json.loads(raw), key=key)
        except json.JSONDecodeError:
            return OperationResult.permanent_error(
                "Stored value is not valid JSON",
                error_code="DESERIALIZATION_ERROR",
                key=key,
            )
