"""Structlog processors that keep secrets and bulky payloads out of logs.

Both factories return plain processors and are installed by
configure_logging(). Command payloads are never logged in full; only
field names are, but the processors still guard nested structures bound
by handlers.
"""

from typing import Any, Callable, Iterable

Processor = Callable[[Any, str, dict[str, Any]], dict[str, Any]]

# Key fragments whose values are replaced before rendering
SENSITIVE_PATTERNS = frozenset(
    {
        "authorization",
        "bearer",
        "cookie",
        "credential",
        "jwt",
        "nonce",
        "password",
        "private_key",
        "secret",
        "session_id",
        "token",
        "api_key",
        "apikey",
    }
)


def _is_sensitive(key: Any, patterns: Iterable[str]) -> bool:
    lowered = str(key).lower()
    return any(pattern in lowered for pattern in patterns)


def mask_sensitive_data(
    mask_value: str = "***REDACTED***",
    additional_patterns: frozenset[str] | None = None,
) -> Processor:
    """Build a processor replacing values stored under sensitive keys.

    Key matching is case-insensitive on substrings and descends into
    nested dicts. ``None`` values are left alone so absent credentials
    remain distinguishable from present ones.
    """
    patterns = SENSITIVE_PATTERNS | (additional_patterns or frozenset())

    def _mask(mapping: dict) -> dict:
        masked = {}
        for key, value in mapping.items():
            if value is not None and _is_sensitive(key, patterns):
                masked[key] = mask_value
            elif isinstance(value, dict):
                masked[key] = _mask(value)
            else:
                masked[key] = value
        return masked

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return _mask(event_dict)

    return processor


def truncate_large_values(max_length: int = 500, max_items: int = 50) -> Processor:
    """Build a processor shortening long strings and long lists.

    Args:
        max_length: Longest string kept intact.
        max_items: Longest list kept intact, e.g. payload field names.
    """

    def _shorten(value: Any) -> Any:
        if isinstance(value, str) and len(value) > max_length:
            return f"{value[:max_length]}...[truncated, {len(value)} chars total]"
        if isinstance(value, list) and len(value) > max_items:
            return value[:max_items] + [f"...[{len(value) - max_items} more]"]
        return value

    def processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        return {key: _shorten(value) for key, value in event_dict.items()}

    return processor
