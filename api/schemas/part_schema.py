"""
Part-related Pydantic schemas.

This module contains schemas for the trained-operators-by-part view.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class PartViewRowResponse(BaseModel):
    """One operator with an entry for the part."""

    operator_name: str = Field(..., description="Operator display name")
    level: str = Field(..., description="Training level as recorded")
    trained: bool = Field(..., description="Whether the level counts as trained")
    priority: int = Field(..., ge=1, le=5, description="Sort rank of the level (1 = Trainer 1)")


class PartViewResponse(BaseModel):
    """Trained-operators-by-part view."""

    found: bool = Field(..., description="Whether the part exists")
    part_number: str = Field(..., description="Part number searched for")
    header: str = Field(..., description="Header line (number and name, or not-found text)")
    common_name: str = Field("", description="Part common name")
    family: str = Field("", description="Part family ('-' when blank)")
    status: str = Field("", description="Part status ('-' when blank)")
    description: str = Field("", description="Part description")
    rows: List[PartViewRowResponse] = Field(default_factory=list, description="Operators, best qualified first")
    message: Optional[str] = Field(None, description="Not-found or empty-state message")

    class Config:
        json_schema_extra = {
            "example": {
                "found": True,
                "part_number": "PN-100",
                "header": "PN-100 - Widget",
                "common_name": "Widget",
                "family": "FAM1",
                "status": "Active",
                "description": "desc",
                "rows": [
                    {"operator_name": "Bob", "level": "Trainer 1", "trained": True, "priority": 1},
                    {"operator_name": "Alice", "level": "Trained", "trained": True, "priority": 3}
                ],
                "message": None
            }
        }
