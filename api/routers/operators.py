"""
Operators router - Operator list, adding operators and the operator view.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_training_service, get_view_service
from api.responses import result_response
from api.schemas.common import OperationResultResponse
from api.schemas.operator_schema import (
    OperatorCreateRequest, OperatorListItem, OperatorListResponse, OperatorViewResponse
)
from services.training_service import TrainingService
from services.view_service import ViewService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix='/operators', tags=['operators'])


@router.get('', response_model=OperatorListResponse)
async def list_operators(
    views: ViewService = Depends(get_view_service)
):
    """
    List all operators sorted by name, for selection controls.

    **Example:**
    ```bash
    curl http://localhost:8000/api/operators
    ```
    """
    items = [OperatorListItem(**asdict(item)) for item in views.operator_list()]
    return OperatorListResponse(total=len(items), items=items)


@router.post(
    '',
    response_model=OperationResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {'model': OperationResultResponse, 'description': 'Empty name'},
        409: {'model': OperationResultResponse, 'description': 'Operator already exists'}
    }
)
async def add_operator(
    request: OperatorCreateRequest,
    service: TrainingService = Depends(get_training_service)
):
    """
    Add an operator with no training entries.

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/operators -H "Content-Type: application/json" \\
         -d '{"name": "Alice"}'
    ```
    """
    result = service.add_operator(request.name)
    return result_response(result, success_status=status.HTTP_201_CREATED)


@router.get('/{operator_name}', response_model=OperatorViewResponse)
async def get_operator_view(
    operator_name: str,
    page: int = Query(1, description="Page number (clamped into range)"),
    views: ViewService = Depends(get_view_service)
):
    """
    Get the paginated training-by-operator view.

    Names match case-insensitively. Pages are clamped, so page 0 returns the
    first page and a page past the end returns the last one.

    **Example:**
    ```bash
    curl "http://localhost:8000/api/operators/alice?page=2"
    ```
    """
    view = views.operator_view(operator_name, page=page)

    if not view.found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=view.message
        )

    return OperatorViewResponse(**asdict(view))
