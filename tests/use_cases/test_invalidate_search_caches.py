"""Tests for the InvalidateSearchCaches use case."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from car_search.domain.errors import InternalError, UnauthorizedError
from car_search.use_cases.invalidate_search_caches import InvalidateSearchCaches
from car_search.use_cases.search_cache import FacetsCache, FilterOptionsCache

TOKEN = "s3cret-token"


@pytest.fixture
def facets_cache() -> Mock:
    cache = Mock(spec=FacetsCache)
    cache.invalidate_all.return_value = True
    return cache


@pytest.fixture
def filter_options_cache() -> Mock:
    cache = Mock(spec=FilterOptionsCache)
    cache.invalidate.return_value = True
    return cache


def test_valid_token_clears_both_caches(facets_cache: Mock, filter_options_cache: Mock) -> None:
    InvalidateSearchCaches(facets_cache, filter_options_cache, TOKEN).execute(TOKEN)

    facets_cache.invalidate_all.assert_called_once_with()
    filter_options_cache.invalidate.assert_called_once_with()


@pytest.mark.parametrize("token", [None, "", "wrong-token"])
def test_bad_token_is_rejected(
    facets_cache: Mock, filter_options_cache: Mock, token: str | None
) -> None:
    with pytest.raises(UnauthorizedError):
        InvalidateSearchCaches(facets_cache, filter_options_cache, TOKEN).execute(token)

    facets_cache.invalidate_all.assert_not_called()


def test_unconfigured_token_rejects_every_call(
    facets_cache: Mock, filter_options_cache: Mock
) -> None:
    with pytest.raises(UnauthorizedError):
        InvalidateSearchCaches(facets_cache, filter_options_cache, None).execute("anything")


def test_backend_failure_raises_internal_error(
    facets_cache: Mock, filter_options_cache: Mock
) -> None:
    filter_options_cache.invalidate.return_value = False

    with pytest.raises(InternalError) as exc_info:
        InvalidateSearchCaches(facets_cache, filter_options_cache, TOKEN).execute(TOKEN)

    assert exc_info.value.context == {"facets_cleared": True, "filter_options_cleared": False}
