"""
Model-related Pydantic schemas.

This module contains the summary schema of the live training model.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ModelSummaryResponse(BaseModel):
    """Summary of the live training model."""

    loaded: bool = Field(..., description="Whether a spreadsheet has been loaded")
    source_name: Optional[str] = Field(None, description="File the model was loaded from")
    loaded_at: datetime = Field(..., description="When the model was built")
    parts: int = Field(..., description="Parts in the catalog")
    operators: int = Field(..., description="Known operators")
    trainings: int = Field(..., description="Training entries across all operators")
    unknown_part_trainings: int = Field(..., description="Training entries on part numbers not in the catalog")
    last_import: Dict[str, Any] = Field(default_factory=dict, description="Statistics of the last import")

    class Config:
        json_schema_extra = {
            "example": {
                "loaded": True,
                "source_name": "training_matrix.csv",
                "loaded_at": "2025-10-15T12:00:00Z",
                "parts": 220,
                "operators": 21,
                "trainings": 1480,
                "unknown_part_trainings": 0,
                "last_import": {"rows_read": 240, "parts": 220}
            }
        }
