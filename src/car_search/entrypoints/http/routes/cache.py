from fastapi import APIRouter, Depends, Header

from car_search.entrypoints.http.dependencies import get_invalidate_search_caches_use_case
from car_search.entrypoints.http.dtos.filter_options import CacheInvalidationResponseDTO
from car_search.entrypoints.http.error_responses import ErrorResponse
from car_search.use_cases.invalidate_search_caches import InvalidateSearchCaches

router = APIRouter(prefix="/cache", tags=["Cache"])


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@router.post(
    "/invalidate",
    response_model=CacheInvalidationResponseDTO,
    summary="Invalidate search caches",
    description="Clears the facets cache and the filter-options cache. Called by the "
    "ingestion pipeline after listings change.",
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        500: {"model": ErrorResponse, "description": "Cache backend failure"},
    },
)
def invalidate_caches(
    authorization: str | None = Header(default=None),
    use_case: InvalidateSearchCaches = Depends(get_invalidate_search_caches_use_case),
) -> CacheInvalidationResponseDTO:
    use_case.execute(bearer_token(authorization))
    return CacheInvalidationResponseDTO(message="Search caches invalidated")
