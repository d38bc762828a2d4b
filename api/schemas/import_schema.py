"""
Import-related Pydantic schemas.

This module contains schemas for training spreadsheet uploads.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class ImportStats(BaseModel):
    """Statistics collected while building a model."""

    rows_read: int = Field(0, description="Rows in the source grid")
    data_rows: int = Field(0, description="Rows with a part number")
    skipped_rows: int = Field(0, description="Rows past the header without a part number")
    parts: int = Field(0, description="Distinct parts registered")
    duplicate_part_rows: int = Field(0, description="Rows repeating an already registered part number")
    operator_columns: int = Field(0, description="Named operator columns in the header row")
    operators: int = Field(0, description="Operators with at least one training entry")
    trainings: int = Field(0, description="Training entries loaded")
    duplicate_operator_headers: List[str] = Field(
        default_factory=list,
        description="Header names that repeat an earlier operator (merged into it)"
    )


class ImportResultResponse(BaseModel):
    """Result of a successful import."""

    message: str = Field(..., description="Status message")
    source_name: Optional[str] = Field(None, description="Uploaded filename")
    stats: ImportStats = Field(..., description="Import statistics")

    class Config:
        json_schema_extra = {
            "example": {
                "message": "File loaded. Parts and operators are ready.",
                "source_name": "training_matrix.csv",
                "stats": {
                    "rows_read": 240,
                    "data_rows": 226,
                    "skipped_rows": 1,
                    "parts": 220,
                    "duplicate_part_rows": 6,
                    "operator_columns": 23,
                    "operators": 21,
                    "trainings": 1480,
                    "duplicate_operator_headers": []
                }
            }
        }
