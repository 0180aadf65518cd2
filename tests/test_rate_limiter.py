"""
Tests for src/core/rate_limiter.py
"""
import pytest

from src.core.rate_limiter import RateLimiter, client_key_for


@pytest.fixture
def limiter(store, clock):
    return RateLimiter(store, max_requests=10, window_seconds=3600, clock=clock)


class TestRateLimiter:

    def test_first_request_creates_window(self, limiter, store, clock):
        assert limiter.check("device:abc").allowed
        assert store.get("ratelimit:device:abc") == {"count": 1, "window_start": clock.now}

    def test_allows_up_to_quota_then_denies(self, limiter):
        for _ in range(10):
            assert limiter.check("device:abc").allowed

        decision = limiter.check("device:abc")
        assert not decision.allowed
        assert decision.retry_after == 3600

    def test_denied_requests_do_not_increment(self, limiter, store):
        for _ in range(12):
            limiter.check("device:abc")
        assert store.get("ratelimit:device:abc")["count"] == 10

    def test_retry_after_counts_down_and_is_at_least_one(self, limiter, clock):
        for _ in range(10):
            limiter.check("device:abc")

        clock.advance(1800)
        assert limiter.check("device:abc").retry_after == 1800

        clock.advance(1799.5)
        assert limiter.check("device:abc").retry_after == 1

    def test_window_resets_after_expiry(self, limiter, store, clock):
        for _ in range(10):
            limiter.check("device:abc")
        assert not limiter.check("device:abc").allowed

        clock.advance(3600)
        assert limiter.check("device:abc").allowed
        assert store.get("ratelimit:device:abc") == {"count": 1, "window_start": clock.now}

    def test_keys_are_independent(self, limiter):
        for _ in range(10):
            limiter.check("device:abc")
        assert not limiter.check("device:abc").allowed
        assert limiter.check("device:xyz").allowed

    def test_wiped_store_starts_fresh(self, limiter, store):
        for _ in range(10):
            limiter.check("device:abc")
        store.clear()
        assert limiter.check("device:abc").allowed

    def test_expired_windows_are_swept(self, limiter, store, clock):
        for i in range(50):
            limiter.check(f"device:{i}")
        assert len(store._data) == 50

        clock.advance(2 * 3600)
        limiter.check("device:new")
        assert list(store._data) == ["ratelimit:device:new"]


class TestClientKey:

    def test_prefers_device_id(self):
        assert client_key_for("abc", "1.2.3.4", "5.6.7.8") == "device:abc"

    def test_blank_device_id_falls_back_to_forwarded_for(self):
        assert client_key_for("  ", "1.2.3.4, 10.0.0.1", "5.6.7.8") == "ip:1.2.3.4"

    def test_falls_back_to_socket_address(self):
        assert client_key_for(None, None, "5.6.7.8") == "ip:5.6.7.8"
        assert client_key_for(None, " , ", "5.6.7.8") == "ip:5.6.7.8"

    def test_anonymous(self):
        assert client_key_for(None, None, None) == "anonymous"
