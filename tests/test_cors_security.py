import importlib
import sys

import pytest


def load_app(monkeypatch, cors_value):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", cors_value)
    for module in ["main", "wsgi", "app.config"]:
        if module in sys.modules:
            del sys.modules[module]
    entry = importlib.import_module("wsgi")
    app = entry.app
    app.config.update(TESTING=True)
    return app.test_client()


def preflight(client, path, origin, method="GET"):
    return client.open(
        path,
        method="OPTIONS",
        headers={"Origin": origin, "Access-Control-Request-Method": method},
    )


@pytest.mark.parametrize("path", ["/health", "/api/cache/flush/all"])
def test_cors_preflight_allows_whitelisted_origin(monkeypatch, path):
    client = load_app(monkeypatch, "http://localhost:3000,https://admin.jippymart.in")
    resp = preflight(client, path, "https://admin.jippymart.in", method="POST")
    assert resp.status_code in (200, 204)
    assert resp.headers.get("Access-Control-Allow-Origin") == "https://admin.jippymart.in"
    vary = resp.headers.get("Vary")
    if vary:
        assert "Origin" in vary


def test_cors_preflight_blocks_disallowed_origin(monkeypatch):
    client = load_app(monkeypatch, "https://admin.jippymart.in")
    resp = preflight(client, "/health", "http://evil.test")
    assert resp.status_code in (200, 204)
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_security_headers_and_exposed_headers(monkeypatch):
    client = load_app(monkeypatch, "*")
    resp = client.get("/health", headers={"Origin": "http://any.test", "X-Request-ID": "abc-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Content-Type-Options") == "nosniff"
    assert resp.headers.get("X-Frame-Options") == "DENY"
    assert resp.headers.get("Referrer-Policy") == "no-referrer"
    assert resp.headers.get("X-Request-ID") == "abc-123"
    expose = resp.headers.get("Access-Control-Expose-Headers", "")
    assert "X-Request-ID" in expose
    assert "traceparent" in expose
