"""
Model router - Summary of the live training model and level choices.
"""

import logging
from fastapi import APIRouter, Depends

from api.dependencies import get_view_service
from api.schemas.model_schema import ModelSummaryResponse
from api.schemas.training_schema import LevelListResponse
from services.level_service import TRAINING_LEVELS, is_trained
from services.view_service import ViewService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=['model'])


@router.get('/model', response_model=ModelSummaryResponse)
async def get_model_summary(
    views: ViewService = Depends(get_view_service)
):
    """
    Get counts of the live model and statistics of the import that built it.

    **Example:**
    ```bash
    curl http://localhost:8000/api/model
    ```
    """
    summary = views.model_summary()
    return ModelSummaryResponse(
        loaded=summary.loaded,
        source_name=summary.source_name,
        loaded_at=summary.loaded_at,
        parts=summary.parts,
        operators=summary.operators,
        trainings=summary.trainings,
        unknown_part_trainings=summary.unknown_part_trainings,
        last_import=summary.last_import
    )


@router.get('/levels', response_model=LevelListResponse)
async def list_levels():
    """
    List the training levels offered when editing, best qualified first.
    """
    return LevelListResponse(
        levels=TRAINING_LEVELS,
        trained_levels=[level for level in TRAINING_LEVELS if is_trained(level)]
    )
