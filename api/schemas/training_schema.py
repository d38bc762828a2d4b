"""
Training-related Pydantic schemas.

This module contains schemas for editing training entries and listing the
level choices.
"""

from typing import List
from pydantic import BaseModel, Field


class TrainingUpdateRequest(BaseModel):
    """Request to set or update an operator's training level on a part."""

    operator_name: str = Field("", description="Operator name (case-insensitive)")
    part_number: str = Field("", description="Part number")
    level: str = Field("", description="Training level, e.g. 'Trained' or 'In Process'")
    create_operator_if_missing: bool = Field(
        False,
        description="Create the operator if it does not exist yet"
    )
    allow_unknown_part: bool = Field(
        False,
        description="Accept part numbers that are not in the catalog"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "operator_name": "Alice",
                "part_number": "PN-100",
                "level": "Trainer 2",
                "create_operator_if_missing": False,
                "allow_unknown_part": False
            }
        }


class LevelListResponse(BaseModel):
    """Training level choices for edit controls."""

    levels: List[str] = Field(..., description="Levels in priority order")
    trained_levels: List[str] = Field(..., description="Levels that count as trained")
