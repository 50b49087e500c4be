"""Tests for the sliding-window limiter and its middleware."""
import pytest
from fastapi.testclient import TestClient

from core.config import settings
from core.database import Database
from core.rate_limit import SlidingWindowRateLimiter
from main import create_app


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestSlidingWindowRateLimiter:
    """Counting hits inside the window."""

    def test_blocks_after_limit_and_recovers(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)

        assert limiter.hit("10.0.0.1") == (True, 1)
        assert limiter.hit("10.0.0.1") == (True, 0)
        assert limiter.hit("10.0.0.1") == (False, 0)

        clock.now += 61
        assert limiter.hit("10.0.0.1") == (True, 1)

    def test_keys_are_independent(self):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
        assert limiter.hit("10.0.0.1")[0] is True
        assert limiter.hit("10.0.0.2")[0] is True
        assert limiter.hit("10.0.0.1")[0] is False

    def test_reset(self):
        limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
        limiter.hit("10.0.0.1")
        limiter.reset("10.0.0.1")
        assert limiter.hit("10.0.0.1")[0] is True

    def test_idle_keys_are_evicted_after_window(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
        for i in range(1000):
            limiter.hit(f"10.0.{i // 256}.{i % 256}")
        assert limiter.tracked_keys() == 1000

        clock.now += 10_000
        limiter.hit("192.168.1.1")
        assert limiter.tracked_keys() == 1

    def test_count_based_sweep_keeps_active_keys(self):
        clock = FakeClock()
        limiter = SlidingWindowRateLimiter(max_requests=10, window_seconds=60, clock=clock, sweep_every=3)
        limiter.hit("old")
        clock.now += 30
        limiter.hit("busy")
        limiter.hit("busy")  # third call sweeps; nothing is stale yet
        assert limiter.tracked_keys() == 2

        clock.now += 35
        limiter.hit("busy")
        limiter.hit("busy")
        assert limiter.tracked_keys() == 2
        limiter.hit("busy")  # third call since the last sweep
        assert limiter.tracked_keys() == 1
        assert limiter.hit("busy") == (True, 4)


@pytest.fixture
def limited_client():
    tight = settings.model_copy(update={"RATE_LIMIT_MAX_REQUESTS": 2})
    database = Database("sqlite://")
    with TestClient(create_app(settings=tight, database=database)) as test_client:
        yield test_client
    database.dispose()


class TestRateLimitMiddleware:
    """The limiter guards everything under /api/."""

    def test_third_request_is_rejected(self, limited_client):
        assert limited_client.get("/api/health").status_code == 200
        second = limited_client.get("/api/health")
        assert second.headers["RateLimit-Remaining"] == "0"

        res = limited_client.get("/api/health")
        assert res.status_code == 429
        assert res.json() == {"success": False, "error": "Too many requests, please try again later"}

    def test_paths_outside_api_are_not_limited(self, limited_client):
        for _ in range(4):
            assert limited_client.get("/docs").status_code == 200
