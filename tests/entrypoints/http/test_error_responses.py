"""Tests for the error envelope models."""

from __future__ import annotations

from car_search.entrypoints.http.error_responses import ErrorBody, ErrorDetail, ErrorResponse


def test_error_response_defaults_to_unsuccessful() -> None:
    response = ErrorResponse(error=ErrorBody(code="NOT_FOUND", message="Listing not found"))

    assert response.model_dump(exclude_none=True) == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Listing not found"},
    }


def test_error_response_with_details() -> None:
    response = ErrorResponse(
        error=ErrorBody(
            code="VALIDATION_ERROR",
            message="Validation failed",
            details=[
                ErrorDetail(
                    field="year_min",
                    message="Must be less than or equal to year_max",
                    code="INVALID_RANGE",
                )
            ],
        )
    )

    dumped = response.model_dump()
    assert dumped["error"]["details"] == [
        {
            "field": "year_min",
            "message": "Must be less than or equal to year_max",
            "code": "INVALID_RANGE",
        }
    ]


def test_error_detail_code_is_optional() -> None:
    assert ErrorDetail(field="vin", message="Required").code is None


def test_error_response_schema_has_examples() -> None:
    schema = ErrorResponse.model_json_schema()

    assert schema["examples"][0]["error"]["code"] == "SEARCH_FAILED"
    assert schema["properties"]["success"]["default"] is False
