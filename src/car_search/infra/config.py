from __future__ import annotations

import os


def database_url() -> str:
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url


def redis_url() -> str | None:
    return os.getenv("REDIS_URL") or None


def cache_invalidation_token() -> str | None:
    return os.getenv("CACHE_INVALIDATION_TOKEN") or None


def facets_cache_ttl_seconds() -> int:
    return _int_env("FACETS_CACHE_TTL_SECONDS", 300)


def filter_options_cache_ttl_seconds() -> int:
    return _int_env("FILTER_OPTIONS_CACHE_TTL_SECONDS", 600)


def search_max_workers() -> int:
    return _int_env("SEARCH_MAX_WORKERS", 8)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default

    try:
        value = int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from None

    if value <= 0:
        raise RuntimeError(f"{name} must be > 0, got {value}")

    return value
