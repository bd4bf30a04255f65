"""
Unit tests for FastAPI application setup and configuration.

This test suite verifies the application structure and wiring:
- build_app() creates a properly configured FastAPI instance
- Application metadata (title, version, docs URLs)
- Router registration (health unversioned, listings and cache under /v1)
- Exception handlers produce the error envelope

Routes are inspected through the OpenAPI schema so no database is needed.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from car_search.domain.errors import DomainError
from car_search.entrypoints.http.app import build_app
from car_search.infra import executors


# ==============================================================================
# Application Creation
# ==============================================================================


def test_build_app_returns_fastapi_instance() -> None:
    assert isinstance(build_app(), FastAPI)


def test_build_app_creates_new_instance_each_call() -> None:
    assert build_app() is not build_app()


# ==============================================================================
# Application Metadata
# ==============================================================================


def test_app_metadata() -> None:
    app = build_app()

    assert app.title == "Car Search API"
    assert app.version == "0.1.0"
    assert "Faceted search" in app.description


def test_app_documentation_urls() -> None:
    app = build_app()

    assert app.docs_url == "/docs"
    assert app.redoc_url == "/redoc"
    assert app.openapi_url == "/openapi.json"


def test_app_documentation_endpoints_are_accessible() -> None:
    client = TestClient(build_app())

    assert client.get("/docs").status_code == 200
    assert client.get("/redoc").status_code == 200

    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"


# ==============================================================================
# Router Registration
# ==============================================================================


def test_app_registers_versioned_routes() -> None:
    paths = build_app().openapi()["paths"]

    assert "/health" in paths
    assert "/v1/listings/search" in paths
    assert "/v1/listings/filters/options" in paths
    assert "/v1/listings/{vin}" in paths
    assert "/v1/listings/{vin}/history" in paths
    assert "/v1/cache/invalidate" in paths

    # Listing routes are only served under the version prefix
    assert "/listings/search" not in paths


def test_health_endpoint_is_reachable() -> None:
    response = TestClient(build_app()).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_cache_invalidation_is_post_only() -> None:
    paths = build_app().openapi()["paths"]

    assert set(paths["/v1/cache/invalidate"]) == {"post"}


# ==============================================================================
# Exception Handlers
# ==============================================================================


def test_app_registers_exception_handlers() -> None:
    app = build_app()

    assert DomainError in app.exception_handlers
    assert RequestValidationError in app.exception_handlers
    assert Exception in app.exception_handlers


# ==============================================================================
# Lifespan
# ==============================================================================


def test_app_shutdown_stops_search_executor() -> None:
    with patch("car_search.entrypoints.http.app.shutdown_search_executor") as shutdown:
        with TestClient(build_app()) as client:
            client.get("/health")
            shutdown.assert_not_called()

    shutdown.assert_called_once_with()


def test_app_shutdown_releases_search_executor_threads() -> None:
    with TestClient(build_app()):
        executor = executors.get_search_executor()

    assert executors._search_executor is None
    # A shut-down pool refuses new work
    with pytest.raises(RuntimeError):
        executor.submit(lambda: None)
