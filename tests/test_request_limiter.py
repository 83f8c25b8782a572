"""Tests for the per-client request limiter"""

from fastapi.testclient import TestClient

from squid_registration.services.request_limiter import RequestLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit_per_client():
    limiter = RequestLimiter(limit=2, window_seconds=900, clock=FakeClock())

    assert limiter.allow("203.0.113.7") is True
    assert limiter.allow("203.0.113.7") is True
    assert limiter.allow("203.0.113.7") is False
    assert limiter.allow("198.51.100.2") is True


def test_window_slides():
    clock = FakeClock()
    limiter = RequestLimiter(limit=1, window_seconds=900, clock=clock)

    assert limiter.allow("203.0.113.7") is True
    clock.now += 899
    assert limiter.allow("203.0.113.7") is False
    clock.now += 1
    assert limiter.allow("203.0.113.7") is True


def test_zero_limit_disables_check():
    limiter = RequestLimiter(limit=0, window_seconds=900)

    assert all(limiter.allow("203.0.113.7") for _ in range(500))


def test_retry_after_text():
    assert RequestLimiter(100, 900).retry_after == "15 minutes"
    assert RequestLimiter(100, 60).retry_after == "1 minute"


def test_every_route_is_limited(app_factory):
    with TestClient(app_factory(global_rate_limit=3)) as client:
        for _ in range(3):
            assert client.get("/api/health").status_code == 200

        health = client.get("/api/health")
        register = client.post("/api/register", json={"role": "player"})

    assert health.status_code == 429
    assert health.json() == {
        "error": "Too many requests from this IP, please try again later.",
        "retryAfter": "15 minutes",
    }
    assert register.status_code == 429
    assert health.headers["x-content-type-options"] == "nosniff"


def test_limit_is_keyed_on_forwarded_address(app_factory):
    app = app_factory(global_rate_limit=1, trusted_proxies="*")

    with TestClient(app) as client:
        first = client.get("/api/health", headers={"X-Forwarded-For": "203.0.113.7"})
        second = client.get("/api/health", headers={"X-Forwarded-For": "198.51.100.2"})
        repeat = client.get("/api/health", headers={"X-Forwarded-For": "203.0.113.7"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert repeat.status_code == 429
