"""
Common Pydantic schemas used across the API.

This module contains shared schemas for pagination, errors, mutation
results and health checks.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Error message")
    detail: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
    path: Optional[str] = Field(None, description="Request path that caused the error")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Resource not found",
                "detail": {"path": "/api/unknown"},
                "timestamp": "2025-10-15T12:00:00Z",
                "path": "/api/unknown"
            }
        }


class PageInfoResponse(BaseModel):
    """Pagination metadata for a paged view."""

    total: int = Field(..., description="Total number of items")
    page: int = Field(..., description="Current page number (after clamping)")
    page_size: int = Field(..., description="Items per page")
    total_pages: int = Field(..., description="Total number of pages")
    start: int = Field(..., description="1-based position of the first item on the page (0 if empty)")
    end: int = Field(..., description="1-based position of the last item on the page (0 if empty)")
    has_previous: bool = Field(..., description="Whether a previous page exists")
    has_next: bool = Field(..., description="Whether a next page exists")


class OperationResultResponse(BaseModel):
    """Result of a mutating call."""

    success: bool = Field(..., description="Operation success flag")
    message: str = Field(..., description="User-facing result message")
    error: Optional[str] = Field(None, description="Error class name when the operation failed")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "message": 'Operator "Alice" added.',
                "error": None
            }
        }


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    model_loaded: bool = Field(..., description="Whether a training spreadsheet has been loaded")
    source_name: Optional[str] = Field(None, description="File the live model was loaded from")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2025-10-15T12:00:00Z",
                "version": "1.0.0",
                "model_loaded": True,
                "source_name": "training_matrix.csv"
            }
        }
