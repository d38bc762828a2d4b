"""
Operator-related Pydantic schemas.

This module contains schemas for the operator list, adding operators and
the paginated training-by-operator view.
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from api.schemas.common import PageInfoResponse


class OperatorListItem(BaseModel):
    """Operator entry for selection controls."""

    name: str = Field(..., description="Operator display name")
    trained_count: int = Field(..., description="Entries whose level counts as trained")
    training_count: int = Field(..., description="All training entries")


class OperatorListResponse(BaseModel):
    """Operators sorted by name."""

    total: int = Field(..., description="Number of operators")
    items: List[OperatorListItem] = Field(..., description="Operators sorted by name")


class OperatorCreateRequest(BaseModel):
    """Request to add an operator."""

    name: str = Field("", description="Operator name")

    class Config:
        json_schema_extra = {
            "example": {"name": "Alice"}
        }


class OperatorViewRowResponse(BaseModel):
    """One training entry of an operator."""

    part_number: str = Field(..., description="Part number")
    common_name: str = Field(..., description="Part common name (blank for unknown parts)")
    family: str = Field(..., description="Part family (blank for unknown parts)")
    description: str = Field(..., description="Part description (blank for unknown parts)")
    status: str = Field(..., description="Part status (blank for unknown parts)")
    level: str = Field(..., description="Training level as recorded")
    trained: bool = Field(..., description="Whether the level counts as trained")
    known_part: bool = Field(..., description="Whether the part number is in the catalog")


class OperatorViewResponse(BaseModel):
    """Training-by-operator view."""

    found: bool = Field(..., description="Whether the operator exists")
    operator_name: str = Field(..., description="Operator display name (or the name searched for)")
    title: str = Field(..., description="View title")
    trained_count: int = Field(0, description="Entries whose level counts as trained")
    rows: List[OperatorViewRowResponse] = Field(default_factory=list, description="Rows on this page")
    pagination: Optional[PageInfoResponse] = Field(None, description="Pagination metadata")
    message: Optional[str] = Field(None, description="Not-found or empty-state message")

    class Config:
        json_schema_extra = {
            "example": {
                "found": True,
                "operator_name": "Alice",
                "title": "Showing training for: Alice - 1 trained part(s)",
                "trained_count": 1,
                "rows": [{
                    "part_number": "PN-100",
                    "common_name": "Widget",
                    "family": "FAM1",
                    "description": "desc",
                    "status": "Active",
                    "level": "Trained",
                    "trained": True,
                    "known_part": True
                }],
                "pagination": {
                    "total": 1, "page": 1, "page_size": 15, "total_pages": 1,
                    "start": 1, "end": 1, "has_previous": False, "has_next": False
                },
                "message": None
            }
        }
