"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error")
    message: str = Field(..., description="Human-readable error message")
    type: Optional[str] = Field(None, description="Error type identifier")
    input: Optional[Any] = Field(None, description="Input value that caused the error")


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["INVALID_FILTER"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking")
    details: Optional[List[ErrorDetail]] = Field(None, description="Field level details")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"description": "Bad Request - Invalid request data", "model": APIErrorResponse},
    401: {"description": "Unauthorized - Authentication required", "model": APIErrorResponse},
    403: {"description": "Forbidden - Insufficient permissions", "model": APIErrorResponse},
    404: {"description": "Not Found - Resource not found", "model": APIErrorResponse},
    409: {"description": "Conflict - Resource already exists", "model": APIErrorResponse},
    422: {"description": "Unprocessable Entity - Validation failed", "model": APIErrorResponse},
    500: {"description": "Internal Server Error", "model": APIErrorResponse},
    503: {"description": "Service Unavailable - Storage unavailable", "model": APIErrorResponse},
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_search_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for search endpoints."""
    return get_error_responses(422, 500, 503)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Get error response schemas for CRUD operations."""
    return get_error_responses(400, 401, 403, 404, 409, 422, 500)
