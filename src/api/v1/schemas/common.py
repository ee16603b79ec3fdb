"""Error and message envelopes shared by every v1 route."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error_code: str = Field(..., description="Stable machine-readable code")
    message: str
    details: Any | None = None


class FieldError(BaseModel):
    """One missing or malformed request field."""

    field: str
    message: str


class ValidationErrorResponse(ErrorResponse):
    """400 body: every offending field is listed, not only the first."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "VALIDATION_ERROR",
                "message": "Request validation failed",
                "details": [
                    {"field": "status", "message": "Status is required"},
                    {"field": "skills", "message": "Skills is required"},
                ],
            }
        },
    )

    details: list[FieldError]


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    model_config = ConfigDict(json_schema_extra={"example": {"message": "User deleted"}})

    message: str
