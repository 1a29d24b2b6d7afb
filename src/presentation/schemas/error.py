"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class FieldErrorSchema(BaseModel):
    field: str
    message: str


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["INVALID_STATE"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Cannot approve transaction 550e8400-e29b-41d4-a716-446655440000 in status approved"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )
    details: list[FieldErrorSchema] | None = Field(
        None,
        description="Field-level problems (validation errors only)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "VALIDATION_ERROR",
                    "message": "conversion_rate: conversion_rate is required for USD transactions",
                    "request_id": "abc123",
                    "details": [
                        {
                            "field": "conversion_rate",
                            "message": "conversion_rate is required for USD transactions",
                        }
                    ],
                }
            ]
        }
    }
