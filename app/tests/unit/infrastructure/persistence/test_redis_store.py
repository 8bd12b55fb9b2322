"""Unit tests for the Redis-backed key-value store."""

import json
from unittest.mock import MagicMock

import pytest
from redis import RedisError
from redis.exceptions import ConnectionError as RedisConnectionError

from infrastructure.persistence import StoreError
from infrastructure.persistence.redis_store import RedisKeyValueStore


@pytest.fixture
def redis_client():
    return MagicMock()


@pytest.fixture
def redis_store(redis_client):
    return RedisKeyValueStore(key_prefix="las", client=redis_client)


class TestRedisKeyValueStore:
    """Tests for RedisKeyValueStore."""

    def test_get_decodes_json(self, redis_store, redis_client):
        redis_client.get.return_value = json.dumps({"count": 2})

        assert redis_store.get("rate_limit:a:1") == {"count": 2}
        redis_client.get.assert_called_once_with("las:rate_limit:a:1")

    def test_get_missing(self, redis_store, redis_client):
        redis_client.get.return_value = None

        assert redis_store.get("key") is None

    def test_get_invalid_json_raises_permanent(self, redis_store, redis_client):
        redis_client.get.return_value = "{not json"

        with pytest.raises(StoreError) as exc_info:
            redis_store.get("key")

        assert exc_info.value.is_transient is False
        assert exc_info.value.result.error_code == "DESERIALIZATION_ERROR"

    def test_get_connection_error_is_transient(self, redis_store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("refused")

        with pytest.raises(StoreError) as exc_info:
            redis_store.get("key")

        assert exc_info.value.is_transient is True
        assert exc_info.value.result.error_code == "CONNECTION_ERROR"

    def test_set_without_ttl(self, redis_store, redis_client):
        redis_store.set("key", {"a": 1})

        redis_client.set.assert_called_once_with("las:key", json.dumps({"a": 1}))
        redis_client.setex.assert_not_called()

    def test_set_with_ttl_uses_setex(self, redis_store, redis_client):
        redis_store.set("key", 1, ttl_seconds=120)

        redis_client.setex.assert_called_once_with("las:key", 120, "1")

    def test_set_unserializable_value(self, redis_store, redis_client):
        with pytest.raises(StoreError) as exc_info:
            redis_store.set("key", {"a": object()})

        assert exc_info.value.result.error_code == "SERIALIZATION_ERROR"
        redis_client.set.assert_not_called()

    def test_set_redis_error(self, redis_store, redis_client):
        redis_client.set.side_effect = RedisError("READONLY")

        with pytest.raises(StoreError) as exc_info:
            redis_store.set("key", 1)

        assert exc_info.value.result.error_code == "REDIS_ERROR"

    def test_delete(self, redis_store, redis_client):
        redis_store.delete("key")

        redis_client.delete.assert_called_once_with("las:key")

    def test_delete_connection_error(self, redis_store, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("refused")

        with pytest.raises(StoreError):
            redis_store.delete("key")

    def test_no_prefix(self, redis_client):
        store = RedisKeyValueStore(client=redis_client)
        redis_client.get.return_value = None

        store.get("key")

        redis_client.get.assert_called_once_with("key")
