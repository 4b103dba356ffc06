from __future__ import annotations

import pytest

from newsgate.config import (
    DEFAULT_DEVELOPMENT_BACKEND,
    DEFAULT_PRODUCTION_BACKEND,
    get_settings,
    is_production,
    resolve_backend_url,
    resolve_public_app_url,
)


def test_explicit_override_wins_and_loses_trailing_slash():
    env = {"BACKEND_URL": "https://staging.example.com/", "APP_ENV": "production"}
    assert resolve_backend_url(env) == "https://staging.example.com"


def test_production_default_without_public_url():
    assert resolve_backend_url({"APP_ENV": "production"}) == DEFAULT_PRODUCTION_BACKEND


def test_production_prefers_public_api_url():
    env = {"VERCEL_ENV": "production", "PUBLIC_API_URL": "https://api.example.org/"}
    assert resolve_backend_url(env) == "https://api.example.org"


def test_development_fallback_ignores_public_api_url():
    env = {"APP_ENV": "development", "PUBLIC_API_URL": "https://api.example.org"}
    assert resolve_backend_url(env) == DEFAULT_DEVELOPMENT_BACKEND


@pytest.mark.parametrize(
    "env, expected",
    [
        ({}, False),
        ({"APP_ENV": "production"}, True),
        ({"APP_ENV": "Production "}, True),
        ({"VERCEL_ENV": "preview"}, False),
        ({"VERCEL_ENV": "production"}, True),
        ({"RENDER": "true"}, True),
        ({"RENDER": "false"}, False),
    ],
)
def test_production_flags(env, expected):
    assert is_production(env) is expected


def test_resolver_is_deterministic():
    env = {"BACKEND_URL": "http://b:5000"}
    assert {resolve_backend_url(env) for _ in range(5)} == {"http://b:5000"}


def test_settings_defaults():
    settings = get_settings({})
    assert settings.backend_url == DEFAULT_DEVELOPMENT_BACKEND
    assert settings.production is False
    assert settings.public_app_url == "http://localhost:3000"
    assert settings.timeout_ms == 25_000
    assert settings.max_retries == 2
    assert settings.retry_base_ms == 1_000
    assert settings.retry_cap_ms == 5_000


def test_settings_read_numeric_knobs():
    settings = get_settings({"BACKEND_TIMEOUT_MS": "1500", "BACKEND_MAX_RETRIES": "0"})
    assert settings.timeout_ms == 1500
    assert settings.max_retries == 0


def test_settings_reject_malformed_numbers():
    with pytest.raises(ValueError, match="BACKEND_MAX_RETRIES"):
        get_settings({"BACKEND_MAX_RETRIES": "many"})


def test_settings_follow_environment_changes(monkeypatch):
    monkeypatch.setenv("BACKEND_URL", "http://first")
    assert get_settings().backend_url == "http://first"
    monkeypatch.setenv("BACKEND_URL", "http://second")
    assert get_settings().backend_url == "http://second"


def test_public_app_url_ignores_malformed_numbers():
    env = {"PUBLIC_APP_URL": "https://site.example/", "BACKEND_TIMEOUT_MS": "soon"}
    assert resolve_public_app_url(env) == "https://site.example"
    assert resolve_public_app_url({}) == "http://localhost:3000"


def test_backend_endpoint_joins_paths():
    settings = get_settings({"BACKEND_URL": "http://b"})
    assert settings.backend_endpoint("/api/admin/delete/1") == "http://b/api/admin/delete/1"
    assert settings.backend_endpoint("api/x") == "http://b/api/x"
