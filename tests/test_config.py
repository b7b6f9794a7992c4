"""Tests for configuration loading via the wsgi entrypoint."""
import importlib
import sys

import pytest


def load_app(monkeypatch, env):
    monkeypatch.setenv('CACHE_DRIVER', 'memory')
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    # Reload modules with updated environment
    for module in ['main', 'wsgi', 'app.config']:
        if module in sys.modules:
            del sys.modules[module]
    entry = importlib.import_module('wsgi')
    return entry.app


def test_testing_config_uses_memory_db(monkeypatch):
    app = load_app(monkeypatch, {'APP_ENV': 'testing', 'TEST_DATABASE_URL': None})
    assert app.config['TESTING'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite://')
    assert app.config['RATELIMIT_ENABLED'] is False


def test_development_defaults(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    app = load_app(monkeypatch, {
        'APP_ENV': 'development',
        'DATABASE_URL': None,
    })
    assert app.config['DEBUG'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite:///dev.db'
    assert app.config['REFERENCE_TIMEZONE'] == 'Asia/Kolkata'


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'production')
    monkeypatch.delenv('SECRET_KEY', raising=False)
    monkeypatch.delenv('DATABASE_URL', raising=False)
    from app.config import get_config_class
    with pytest.raises(RuntimeError, match="SECRET_KEY"):
        get_config_class()


def test_cache_ttls_read_from_env(monkeypatch):
    app = load_app(monkeypatch, {'APP_ENV': 'testing', 'NEAREST_CACHE_TTL': '60'})
    assert app.config['NEAREST_CACHE_TTL'] == 60
    assert app.config['CATALOG_CACHE_TTL'] == 86400
