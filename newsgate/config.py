"""Runtime configuration resolved from the environment.

Everything here is re-evaluated on each call to `get_settings()`; handlers get
a fresh `Settings` per request through FastAPI's dependency injection, so a
changed environment takes effect on the next request.
"""
from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field

__all__ = [
    "DEFAULT_PRODUCTION_BACKEND",
    "DEFAULT_DEVELOPMENT_BACKEND",
    "DEFAULT_APP_URL",
    "Settings",
    "is_production",
    "resolve_backend_url",
    "resolve_public_app_url",
    "resolve_log_level",
    "get_settings",
]

DEFAULT_PRODUCTION_BACKEND = "https://api.dailyvaibe.com"
DEFAULT_DEVELOPMENT_BACKEND = "http://localhost:5000"
DEFAULT_APP_URL = "http://localhost:3000"


class Settings(BaseModel):
    """Per-request view of the recognized environment variables."""

    backend_url: str
    production: bool = False
    public_app_url: str = DEFAULT_APP_URL
    timeout_ms: int = Field(25_000, gt=0)
    max_retries: int = Field(2, ge=0)
    retry_base_ms: int = Field(1_000, ge=0)
    retry_cap_ms: int = Field(5_000, ge=0)
    log_level: str = "INFO"

    def backend_endpoint(self, path: str) -> str:
        """Join an absolute backend path onto the resolved origin."""
        return f"{self.backend_url}/{path.lstrip('/')}"


def _env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def _clean(value: str | None) -> str:
    return (value or "").strip()


def is_production(env: Mapping[str, str] | None = None) -> bool:
    """Return True when any recognized production flag is set."""
    env = _env(env)
    return (
        _clean(env.get("APP_ENV")).lower() == "production"
        or _clean(env.get("VERCEL_ENV")).lower() == "production"
        or _clean(env.get("RENDER")).lower() == "true"
    )


def resolve_backend_url(env: Mapping[str, str] | None = None) -> str:
    """Derive the backend origin, without a trailing slash.

    Precedence: BACKEND_URL > production default (PUBLIC_API_URL or the
    hosted API) > local development fallback.
    """
    env = _env(env)
    override = _clean(env.get("BACKEND_URL"))
    if override:
        return override.rstrip("/")
    if is_production(env):
        public = _clean(env.get("PUBLIC_API_URL"))
        return (public or DEFAULT_PRODUCTION_BACKEND).rstrip("/")
    return DEFAULT_DEVELOPMENT_BACKEND


def resolve_public_app_url(env: Mapping[str, str] | None = None) -> str:
    """Origin of the public site, the CORS fallback when a request sends none.

    Reads only `PUBLIC_APP_URL`, so a malformed numeric variable elsewhere
    never stops error responses from carrying CORS headers.
    """
    return _clean(_env(env).get("PUBLIC_APP_URL")).rstrip("/") or DEFAULT_APP_URL


def resolve_log_level(env: Mapping[str, str] | None = None) -> str:
    return _clean(_env(env).get("LOG_LEVEL")).upper() or "INFO"


def _int_from_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = _clean(env.get(name))
    if not raw:
        return default
    try:
        return int(raw, 10)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer") from e


def get_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build `Settings` from the environment (or an explicit mapping)."""
    env = _env(env)
    return Settings(
        backend_url=resolve_backend_url(env),
        production=is_production(env),
        public_app_url=resolve_public_app_url(env),
        timeout_ms=_int_from_env(env, "BACKEND_TIMEOUT_MS", 25_000),
        max_retries=_int_from_env(env, "BACKEND_MAX_RETRIES", 2),
        retry_base_ms=_int_from_env(env, "BACKEND_RETRY_BASE_MS", 1_000),
        retry_cap_ms=_int_from_env(env, "BACKEND_RETRY_CAP_MS", 5_000),
        log_level=resolve_log_level(env),
    )
