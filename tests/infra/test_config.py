"""Tests for environment-driven configuration."""

from __future__ import annotations

from typing import Callable

import pytest

from car_search.infra.config import (
    cache_invalidation_token,
    database_url,
    facets_cache_ttl_seconds,
    filter_options_cache_ttl_seconds,
    redis_url,
    search_max_workers,
)


def test_database_url_is_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        database_url()


def test_database_url_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://app:app@db:5432/cars")

    assert database_url() == "postgresql+psycopg://app:app@db:5432/cars"


@pytest.mark.parametrize(
    ("accessor", "name"),
    [(redis_url, "REDIS_URL"), (cache_invalidation_token, "CACHE_INVALIDATION_TOKEN")],
)
def test_optional_settings_treat_empty_as_unset(
    monkeypatch: pytest.MonkeyPatch, accessor: Callable[[], str | None], name: str
) -> None:
    monkeypatch.setenv(name, "")
    assert accessor() is None

    monkeypatch.setenv(name, "value")
    assert accessor() == "value"


def test_integer_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FACETS_CACHE_TTL_SECONDS", "FILTER_OPTIONS_CACHE_TTL_SECONDS", "SEARCH_MAX_WORKERS"):
        monkeypatch.delenv(name, raising=False)

    assert facets_cache_ttl_seconds() == 300
    assert filter_options_cache_ttl_seconds() == 600
    assert search_max_workers() == 8


def test_integer_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCH_MAX_WORKERS", "16")

    assert search_max_workers() == 16


@pytest.mark.parametrize("raw", ["many", "1.5"])
def test_integer_setting_must_parse(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("FACETS_CACHE_TTL_SECONDS", raw)

    with pytest.raises(RuntimeError, match="must be an integer"):
        facets_cache_ttl_seconds()


@pytest.mark.parametrize("raw", ["0", "-5"])
def test_integer_setting_must_be_positive(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("SEARCH_MAX_WORKERS", raw)

    with pytest.raises(RuntimeError, match="must be > 0"):
        search_max_workers()
