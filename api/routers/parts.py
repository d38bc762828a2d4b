"""
Parts router - Trained-operators-by-part view.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_view_service
from api.schemas.part_schema import PartViewResponse
from services.view_service import ViewService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix='/parts', tags=['parts'])


@router.get('/{part_number:path}', response_model=PartViewResponse)
async def get_part_view(
    part_number: str,
    views: ViewService = Depends(get_view_service)
):
    """
    Get every operator with an entry for a part, best qualified first.

    Order: Trainer 1, Trainer 2, Trained, In Process, anything else; ties by
    operator name. A known part with no entries returns an empty list and an
    empty-state message.

    **Example:**
    ```bash
    curl http://localhost:8000/api/parts/PN-100
    ```
    """
    view = views.part_view(part_number)

    if not view.found:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=view.message
        )

    return PartViewResponse(**asdict(view))
