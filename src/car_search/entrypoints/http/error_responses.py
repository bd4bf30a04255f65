"""REST API error response models.

Every error is wrapped in the same envelope so clients can branch on
``success`` before looking at the payload.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """Field-level error, used in ``details`` of validation errors."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "price_min",
                "message": "Must be less than or equal to price_max",
                "code": "INVALID_RANGE",
            }
        }
    )


class ErrorBody(BaseModel):
    code: str
    message: str
    details: list[ErrorDetail] | None = None


class ErrorResponse(BaseModel):
    """Structured error response format.

    Examples:
        Simple error:
            {
                "success": false,
                "error": {"code": "NOT_FOUND", "message": "Listing ... not found"}
            }

        Validation error with field details:
            {
                "success": false,
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Validation failed",
                    "details": [
                        {
                            "field": "year_min",
                            "message": "Must be less than or equal to year_max",
                            "code": "INVALID_RANGE"
                        }
                    ]
                }
            }
    """

    success: bool = False
    error: ErrorBody

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "success": False,
                    "error": {"code": "SEARCH_FAILED", "message": "Search failed"},
                },
                {
                    "success": False,
                    "error": {
                        "code": "VALIDATION_ERROR",
                        "message": "Validation failed",
                        "details": [
                            {
                                "field": "year_min",
                                "message": "Must be less than or equal to year_max",
                                "code": "INVALID_RANGE",
                            }
                        ],
                    },
                },
            ]
        }
    )
