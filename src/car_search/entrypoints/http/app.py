from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from car_search.entrypoints.http.exception_handlers import register_exception_handlers
from car_search.entrypoints.http.routes.cache import router as cache_router
from car_search.entrypoints.http.routes.health import router as health_router
from car_search.entrypoints.http.routes.listings import router as listings_router
from car_search.infra.executors import shutdown_search_executor


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_search_executor()


def build_app() -> FastAPI:
    app = FastAPI(
        title="Car Search API",
        description="""
        Faceted search over used and new vehicle listings.

        ## Features
        - Search listings with multi-value filters, ranges and radius search
        - Facet counts, summary stats and histogram buckets for the filtered set
        - Filter options for building search UIs
        - Listing detail and price history by VIN

        ## Authentication
        Only cache invalidation requires a bearer token.

        ## Error Handling
        All errors return `{"success": false, "error": {"code", "message", "details"?}}`.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(listings_router, prefix="/v1")
    app.include_router(cache_router, prefix="/v1")

    return app


app = build_app()
