"""Tests for FastAPI exception handlers."""

import logging

import pytest
from fastapi import FastAPI, Query
from fastapi.testclient import TestClient

from car_search.domain.errors import (
    InternalError,
    NotFoundError,
    SearchExecutionError,
    UnauthorizedError,
    ValidationError,
)
from car_search.entrypoints.http.exception_handlers import (
    error_envelope,
    register_exception_handlers,
)


@pytest.fixture
def app() -> FastAPI:
    """Create a minimal FastAPI app with exception handlers registered."""
    test_app = FastAPI()
    register_exception_handlers(test_app)

    @test_app.get("/validation-error")
    def raise_validation_error() -> None:
        raise ValidationError("Validation failed")

    @test_app.get("/validation-error-with-fields")
    def raise_validation_error_with_fields() -> None:
        raise ValidationError(
            errors=[
                {
                    "field": "price_min",
                    "message": "Must be less than or equal to price_max",
                    "code": "INVALID_RANGE",
                }
            ]
        )

    @test_app.get("/not-found-error")
    def raise_not_found_error() -> None:
        raise NotFoundError("Listing", "1HGCM82633A004352")

    @test_app.get("/unauthorized-error")
    def raise_unauthorized_error() -> None:
        raise UnauthorizedError("Missing or invalid invalidation token")

    @test_app.get("/search-error")
    def raise_search_error() -> None:
        try:
            raise ConnectionError("could not connect to server: 10.0.0.5:5432")
        except ConnectionError as e:
            raise SearchExecutionError() from e

    @test_app.get("/internal-error")
    def raise_internal_error() -> None:
        raise InternalError("Cache invalidation failed")

    @test_app.get("/unexpected-error")
    def raise_unexpected_error() -> None:
        raise RuntimeError("Something went wrong")

    @test_app.get("/typed-param")
    def typed_param(per_page: int = Query(le=100)) -> dict:
        return {"per_page": per_page}

    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create a test client."""
    return TestClient(app, raise_server_exceptions=False)


# ==============================================================================
# Domain errors
# ==============================================================================


def test_validation_error_returns_400(client: TestClient) -> None:
    response = client.get("/validation-error")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": {"code": "VALIDATION_ERROR", "message": "Validation failed"},
    }


def test_validation_error_with_fields_includes_details(client: TestClient) -> None:
    response = client.get("/validation-error-with-fields")

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"] == [
        {
            "field": "price_min",
            "message": "Must be less than or equal to price_max",
            "code": "INVALID_RANGE",
        }
    ]


def test_not_found_error_returns_404(client: TestClient) -> None:
    response = client.get("/not-found-error")

    assert response.status_code == 404
    error = response.json()["error"]
    assert error["code"] == "NOT_FOUND"
    assert "1HGCM82633A004352" in error["message"]


def test_unauthorized_error_returns_401(client: TestClient) -> None:
    response = client.get("/unauthorized-error")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_search_error_returns_500_without_leaking_cause(client: TestClient) -> None:
    response = client.get("/search-error")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "SEARCH_FAILED", "message": "Search failed"},
    }
    assert "10.0.0.5" not in response.text


def test_search_error_logs_cause(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        client.get("/search-error")

    record = next(r for r in caplog.records if r.getMessage() == "Domain error occurred")
    assert record.exc_info is not None
    assert record.exc_info[0] is ConnectionError


def test_internal_error_returns_500(client: TestClient) -> None:
    response = client.get("/internal-error")

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "INTERNAL_ERROR"


# ==============================================================================
# Framework and unexpected errors
# ==============================================================================


def test_request_validation_error_returns_400(client: TestClient) -> None:
    response = client.get("/typed-param", params={"per_page": "many"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["message"] == "Invalid request parameters"
    assert error["details"][0]["field"] == "per_page"


def test_request_validation_error_for_constraint(client: TestClient) -> None:
    response = client.get("/typed-param", params={"per_page": 500})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["field"] == "per_page"


def test_unexpected_error_returns_generic_500(client: TestClient) -> None:
    response = client.get("/unexpected-error")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"},
    }
    assert "Something went wrong" not in response.text


# ==============================================================================
# error_envelope
# ==============================================================================


def test_error_envelope_omits_empty_details() -> None:
    assert error_envelope("NOT_FOUND", "gone", details=[]) == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "gone"},
    }
