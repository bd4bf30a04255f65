"""Tests for the shared search executor."""

from __future__ import annotations

from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor

import pytest

from car_search.infra.executors import get_search_executor, shutdown_search_executor


@pytest.fixture(autouse=True)
def fresh_executor() -> Iterator[None]:
    shutdown_search_executor()
    yield
    shutdown_search_executor()


def test_executor_is_shared(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEARCH_MAX_WORKERS", "3")

    executor = get_search_executor()

    assert isinstance(executor, ThreadPoolExecutor)
    assert executor._max_workers == 3
    assert get_search_executor() is executor


def test_executor_runs_tasks() -> None:
    assert get_search_executor().submit(lambda: 41 + 1).result(timeout=5) == 42


def test_shutdown_resets_executor() -> None:
    first = get_search_executor()

    shutdown_search_executor()

    assert get_search_executor() is not first
