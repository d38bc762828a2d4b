"""
Trainings router - Set or update an operator's training level on a part.
"""

import logging
from fastapi import APIRouter, Depends

from api.dependencies import get_training_service
from api.responses import result_response
from api.schemas.common import OperationResultResponse
from api.schemas.training_schema import TrainingUpdateRequest
from services.training_service import TrainingService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix='/trainings', tags=['trainings'])


@router.put(
    '',
    response_model=OperationResultResponse,
    responses={
        400: {'model': OperationResultResponse, 'description': 'Missing operator, part or level'},
        404: {'model': OperationResultResponse, 'description': 'Unknown part or operator'}
    }
)
async def set_training(
    request: TrainingUpdateRequest,
    service: TrainingService = Depends(get_training_service)
):
    """
    Set (or overwrite) a training level.

    By default both the operator and the part must already exist; set
    `create_operator_if_missing` or `allow_unknown_part` to relax that.
    The next operator or part view reflects the change.

    **Example:**
    ```bash
    curl -X PUT http://localhost:8000/api/trainings -H "Content-Type: application/json" \\
         -d '{"operator_name": "Alice", "part_number": "PN-100", "level": "Trainer 2"}'
    ```
    """
    result = service.set_training(
        request.operator_name,
        request.part_number,
        request.level,
        create_operator_if_missing=request.create_operator_if_missing,
        allow_unknown_part=request.allow_unknown_part
    )
    return result_response(result)
