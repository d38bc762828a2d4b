"""
Pydantic schemas for request/response validation.

This package contains all Pydantic models used for API request validation
and response serialization.
"""

from api.schemas.common import (
    ErrorResponse, PageInfoResponse, OperationResultResponse, HealthCheckResponse
)
from api.schemas.import_schema import ImportStats, ImportResultResponse
from api.schemas.model_schema import ModelSummaryResponse
from api.schemas.operator_schema import (
    OperatorListItem, OperatorListResponse, OperatorCreateRequest,
    OperatorViewRowResponse, OperatorViewResponse
)
from api.schemas.part_schema import PartViewRowResponse, PartViewResponse
from api.schemas.training_schema import TrainingUpdateRequest, LevelListResponse

__all__ = [
    # Common
    'ErrorResponse',
    'PageInfoResponse',
    'OperationResultResponse',
    'HealthCheckResponse',

    # Import
    'ImportStats',
    'ImportResultResponse',

    # Model
    'ModelSummaryResponse',

    # Operator
    'OperatorListItem',
    'OperatorListResponse',
    'OperatorCreateRequest',
    'OperatorViewRowResponse',
    'OperatorViewResponse',

    # Part
    'PartViewRowResponse',
    'PartViewResponse',

    # Training
    'TrainingUpdateRequest',
    'LevelListResponse',
]
