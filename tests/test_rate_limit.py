import importlib
import sys

import pytest

import extensions
from app.version import API_PREFIX


def _load_app(monkeypatch, **limits):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setenv("RATELIMIT_ENABLED", "1")
    for name, value in limits.items():
        monkeypatch.setenv(name, value)
    for module in ["main", "wsgi", "app.config"]:
        if module in sys.modules:
            del sys.modules[module]
    entry = importlib.import_module("wsgi")
    return entry.app


@pytest.fixture(autouse=True)
def _restore_limiter(monkeypatch):
    monkeypatch.setattr(extensions.limiter, "enabled", extensions.limiter.enabled)
    yield
    extensions.limiter.reset()


def test_search_rate_limit(monkeypatch):
    app = _load_app(monkeypatch, SEARCH_LIMIT_PER_IP="3 per minute")
    client = app.test_client()
    for i in range(4):
        r = client.get(f"{API_PREFIX}/search/categories?q=veg")
    assert r.status_code == 429
    assert "limit" in r.get_json()["message"].lower()


def test_cache_flush_rate_limit(monkeypatch):
    app = _load_app(monkeypatch, CACHE_FLUSH_LIMIT_PER_IP="2 per minute")
    client = app.test_client()
    for i in range(3):
        r = client.post(f"{API_PREFIX}/cache/flush/settings")
    assert r.status_code == 429
    assert r.get_json()["success"] is False
