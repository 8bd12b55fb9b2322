"""Fixed-window rate limiter backed by the shared key-value store.

Each (action, actor) pair owns one counter ``{"window": id, "count": n}``
where ``id = floor(now / window_s)``. The counter resets when the window
rolls over and expires through the store's own TTL. Bursts at a window
boundary (up to twice the limit across two adjacent windows) are accepted.
"""

import math
import time
from typing import Callable, Optional

from infrastructure.commands.models import AdmissionDecision
from infrastructure.commands.errors import ErrorCode
from infrastructure.logging import get_module_logger
from infrastructure.persistence import KeyValueStore

logger = get_module_logger()


class RateLimiter:
    """Per-actor, per-action fixed-window counter.

    Args:
        store: Shared key-value store holding the counters
        limit: Default number of calls permitted per window
        window_s: Window length in seconds
        clock: Time source (seconds since epoch)
    """

    KEY_PREFIX = "rate_limit"

    def __init__(
        self,
        store: KeyValueStore,
        limit: int = 60,
        window_s: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        if window_s < 1:
            raise ValueError("window_s must be at least 1")

        self.store = store
        self.limit = limit
        self.window_s = window_s
        self._clock = clock

    def _key(self, action: str, actor_id: str) -> str:
        return f"{self.KEY_PREFIX}:{action}:{actor_id}"

    def current_window(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        return math.floor(now / self.window_s)

    def check(
        self, action: str, actor_id: str, limit: Optional[int] = None
    ) -> AdmissionDecision:
        """Count one call and decide whether it is within the limit.

        The count is incremented even when the call is denied.
        """
        limit = self.limit if limit is None else limit
        now = self._clock()
        window = self.current_window(now)
        key = self._key(action, actor_id)

        counter = self.store.get(key)
        if not isinstance(counter, dict) or counter.get("window") != window:
            counter = {"window": window, "count": 0}

        counter["count"] = int(counter.get("count", 0)) + 1
        self.store.set(key, counter, ttl_seconds=self.window_s * 2)

        if counter["count"] > limit:
            retry_after = max(1, math.ceil((window + 1) * self.window_s - now))
            logger.warning(
                "rate_limit_exceeded",
                action=action,
                actor_id=actor_id,
                count=counter["count"],
                limit=limit,
                retry_after=retry_after,
            )
            return AdmissionDecision.deny(
                ErrorCode.RATE_LIMITED, retry_after=retry_after
            )

        return AdmissionDecision.allow()

    def remaining(self, action: str, actor_id: str, limit: Optional[int] = None) -> int:
        """Calls left in the current window (does not count a call)."""
        limit = self.limit if limit is None else limit
        counter = self.store.get(self._key(action, actor_id))
        if (
            not isinstance(counter, dict)
            or counter.get("window") != self.current_window()
        ):
            return limit
        return max(0, limit - int(counter.get("count", 0)))

    def reset(self, action: str, actor_id: str) -> None:
        self.store.delete(self._key(action, actor_id))
