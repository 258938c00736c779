"""
Tests for the custom middleware stack.
"""
from types import SimpleNamespace

from fastapi import FastAPI
from fastapi.testclient import TestClient

from clinic.core import middleware
from clinic.core.middleware import RateLimitMiddleware, SecurityHeadersMiddleware


def _app(**limits):
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RateLimitMiddleware, **limits)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    return app


def test_rate_limit_rejects_requests_over_the_limit():
    client = TestClient(_app(rate_limit=2, window_seconds=60))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200

    response = client.get("/ping")
    assert response.status_code == 429
    assert response.json()["error"] == "RATE_LIMIT_EXCEEDED"


def test_rate_limit_window_expires(monkeypatch):
    clock = {"now": 1000.0}
    monkeypatch.setattr(middleware, "time", SimpleNamespace(time=lambda: clock["now"]))
    client = TestClient(_app(rate_limit=1, window_seconds=60))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 429

    clock["now"] += 61
    assert client.get("/ping").status_code == 200


def test_security_headers_are_added():
    client = TestClient(_app())
    response = client.get("/ping")
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "no-referrer"


def test_prune_forgets_idle_clients():
    limiter = RateLimitMiddleware(FastAPI(), rate_limit=5, window_seconds=60)
    limiter.requests = {"10.0.0.1": [0.0, 10.0], "10.0.0.2": [100.0], "10.0.0.3": []}

    limiter.prune(now=110.0)

    assert limiter.requests == {"10.0.0.2": [100.0]}


def test_idle_clients_are_swept_once_per_window(monkeypatch):
    clock = {"now": 1000.0}
    monkeypatch.setattr(middleware, "time", SimpleNamespace(time=lambda: clock["now"]))
    app = _app(rate_limit=5, window_seconds=60)
    client = TestClient(app)
    client.get("/ping")
    limiter = app.middleware_stack
    while not isinstance(limiter, RateLimitMiddleware):
        limiter = limiter.app
    limiter.requests["10.0.0.9"] = [clock["now"]]

    clock["now"] += 61
    client.get("/ping")

    assert "10.0.0.9" not in limiter.requests
    assert list(limiter.requests) == ["testclient"]
