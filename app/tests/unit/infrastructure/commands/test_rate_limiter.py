"""Unit tests for the fixed-window rate limiter."""

import pytest

from infrastructure.commands import ErrorCode, RateLimiter


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_allows_up_to_limit(self, rate_limiter):
        """Test that calls up to the limit are allowed."""
        decisions = [rate_limiter.check("save", "1") for _ in range(3)]

        assert all(decision.allowed for decision in decisions)

    def test_denies_over_limit_with_retry_after(self, rate_limiter, clock):
        """Test that the call after the limit is denied until the window rolls."""
        clock.now = 1_700_000_010.0  # 10s into a 60s window
        for _ in range(3):
            rate_limiter.check("save", "1")

        decision = rate_limiter.check("save", "1")

        assert decision.allowed is False
        assert decision.reason == ErrorCode.RATE_LIMITED
        assert 1 <= decision.retry_after <= 60

    def test_denied_calls_still_count(self, rate_limiter, kv_store):
        for _ in range(5):
            rate_limiter.check("save", "1")

        assert kv_store.get("rate_limit:save:1")["count"] == 5

    def test_window_rollover_resets_counter(self, rate_limiter, clock):
        """Test that a new window starts from zero."""
        for _ in range(4):
            rate_limiter.check("save", "1")

        clock.advance(60)

        assert rate_limiter.check("save", "1").allowed is True
        assert rate_limiter.remaining("save", "1") == 2

    def test_counters_are_per_actor_and_action(self, rate_limiter):
        for _ in range(3):
            rate_limiter.check("save", "1")

        assert rate_limiter.check("save", "2").allowed is True
        assert rate_limiter.check("reset", "1").allowed is True
        assert rate_limiter.check("save", "1").allowed is False

    def test_limit_override(self, rate_limiter):
        assert rate_limiter.check("save", "1", limit=1).allowed is True
        assert rate_limiter.check("save", "1", limit=1).allowed is False

    def test_counter_written_with_ttl(self, rate_limiter, kv_store, clock):
        """Test that counters expire through the store TTL."""
        rate_limiter.check("save", "1")

        clock.advance(121)

        assert kv_store.get("rate_limit:save:1") is None

    def test_remaining_and_reset(self, rate_limiter):
        rate_limiter.check("save", "1")
        assert rate_limiter.remaining("save", "1") == 2

        rate_limiter.reset("save", "1")

        assert rate_limiter.remaining("save", "1") == 3

    def test_current_window(self, rate_limiter):
        assert rate_limiter.current_window(120.5) == 2

    @pytest.mark.parametrize("kwargs", [{"limit": 0}, {"window_s": 0}])
    def test_invalid_configuration(self, kv_store, kwargs):
        with pytest.raises(ValueError):
            RateLimiter(kv_store, **kwargs)
