"""Invalidate search caches use case."""

from __future__ import annotations

import hmac
import logging

from car_search.domain.errors import InternalError, UnauthorizedError
from car_search.use_cases.search_cache import FacetsCache, FilterOptionsCache

logger = logging.getLogger(__name__)


class InvalidateSearchCaches:
    """
    Drop cached facets and filter options after the listing set changes.

    Guarded by a shared token. With no token configured the operation is
    disabled and every call is rejected.
    """

    def __init__(
        self,
        facets_cache: FacetsCache,
        filter_options_cache: FilterOptionsCache,
        expected_token: str | None,
    ) -> None:
        self._facets_cache = facets_cache
        self._filter_options_cache = filter_options_cache
        self._expected_token = expected_token

    def execute(self, token: str | None) -> None:
        """
        Raises:
            UnauthorizedError: If the token is missing or does not match
            InternalError: If either cache could not be cleared
        """
        if not self._expected_token or not token:
            raise UnauthorizedError("Missing or invalid invalidation token")
        if not hmac.compare_digest(token.encode(), self._expected_token.encode()):
            logger.warning("Rejected cache invalidation with bad token")
            raise UnauthorizedError("Missing or invalid invalidation token")

        facets_ok = self._facets_cache.invalidate_all()
        options_ok = self._filter_options_cache.invalidate()
        if not (facets_ok and options_ok):
            raise InternalError(
                "Cache invalidation failed",
                facets_cleared=facets_ok,
                filter_options_cleared=options_ok,
            )
