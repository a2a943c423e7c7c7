"""
Environment-driven settings and logging setup.

Every value is read lazily from the process environment so tests can
override them with `monkeypatch.setenv`.
"""

from __future__ import annotations

import logging
import os

PRODUCTION = "production"

DOCS_URL = "/api"
OPENAPI_URL = "/api-json"
REDOC_URL = "/api/redoc"


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def environment() -> str:
    return _env_str("ENVIRONMENT", "development").lower()


def is_production() -> bool:
    return environment() == PRODUCTION


def docs_enabled() -> bool:
    # Interactive API explorer is only exposed outside production.
    return not is_production()


def mongodb_url() -> str:
    return _env_str("MONGODB_URL", "mongodb://localhost:27017")


def mongodb_database() -> str:
    return _env_str("MONGODB_DATABASE", "users_api")


def mongodb_timeout_ms() -> int:
    return _env_int("MONGODB_TIMEOUT_MS", 5000)


def cors_origins() -> list[str]:
    # Comma-separated; empty disables CORS.
    raw = os.environ.get("CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
