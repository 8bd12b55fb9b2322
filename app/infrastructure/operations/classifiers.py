"""Map store client exceptions onto OperationResult.

Usage:
    from infrastructure.operations.classifiers import classify_redis_error

    try:
        client.get(key)
    except RedisError as exc:
        return classify_redis_error(exc, key=key, operation="get")
"""

from typing import Optional

from redis.exceptions import ConnectionError, RedisError, TimeoutError  # type: ignore

from infrastructure.operations.result import OperationResult


def classify_redis_error(
    exc: Exception, key: Optional[str] = None, operation: str = "call"
) -> OperationResult:
    """Classify a redis client exception.

    Connection and timeout errors are transient (CONNECTION_ERROR). Any
    other RedisError, such as READONLY or WRONGTYPE replies, is permanent
    (REDIS_ERROR). Anything that is not a RedisError is reported as a
    permanent UNKNOWN_ERROR.
    """
    target = f" {key}" if key else ""
    if isinstance(exc, (ConnectionError, TimeoutError)):
        return OperationResult.transient_error(
            f"Connection error during {operation}{target}: {exc}",
            error_code="CONNECTION_ERROR",
            key=key,
        )
    if isinstance(exc, RedisError):
        return OperationResult.permanent_error(
            f"Redis rejected {operation}{target}: {exc}",
            error_code="REDIS_ERROR",
            key=key,
        )
    return OperationResult.permanent_error(
        f"Unexpected {type(exc).__name__} during {operation}{target}: {exc}",
        error_code="UNKNOWN_ERROR",
        key=key,
    )
