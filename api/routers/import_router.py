"""
Import router - Handle training spreadsheet uploads.

This module provides the endpoint that uploads a CSV or Excel export and
makes it the live training model.
"""

import logging
from typing import Optional

from fastapi import APIRouter, UploadFile, File, Form, Depends, HTTPException, status

from api.config import settings
from api.dependencies import get_training_service, verify_file_extension, verify_file_size
from api.schemas.import_schema import ImportResultResponse, ImportStats
from backend.models.errors import ConfigurationError, FileReadError
from backend.models.training import LayoutConfig
from services.training_import_service import TrainingImportService
from services.training_service import TrainingService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix='/import', tags=['import'])


@router.post('/upload', response_model=ImportResultResponse)
async def upload_training_file(
    file: UploadFile = File(..., description="Training export (.csv, .xlsx or .xlsm)"),
    header_row_index: Optional[int] = Form(None, ge=0, description="Override: zero-based header row"),
    first_data_row_index: Optional[int] = Form(None, ge=0, description="Override: zero-based first data row"),
    operator_col_start: Optional[int] = Form(None, ge=0, description="Override: first operator column"),
    operator_col_end: Optional[int] = Form(None, ge=0, description="Override: last operator column (inclusive)"),
    sheet_name: Optional[str] = Form(None, description="Worksheet to read (workbooks only)"),
    service: TrainingService = Depends(get_training_service)
):
    """
    Upload a training spreadsheet and replace the live model with it.

    The file is parsed and a complete new model is built before anything is
    swapped in. If the file does not match the layout, the previous model
    stays live and 422 is returned.

    **Layout:**
    Offsets default to the configured ones (header row 12, data from row 13,
    operator columns 16-38); each can be overridden per upload.

    **Example:**
    ```bash
    curl -F "file=@training_matrix.csv" http://localhost:8000/api/import/upload
    ```
    """
    logger.info(f"Upload request: {file.filename}")

    verify_file_extension(file.filename)

    content = await file.read()
    verify_file_size(len(content))

    defaults = settings.layout
    layout = LayoutConfig(
        header_row_index=defaults.header_row_index if header_row_index is None else header_row_index,
        first_data_row_index=defaults.first_data_row_index if first_data_row_index is None else first_data_row_index,
        operator_col_start=defaults.operator_col_start if operator_col_start is None else operator_col_start,
        operator_col_end=defaults.operator_col_end if operator_col_end is None else operator_col_end
    )

    importer = TrainingImportService(layout=layout, sheet_name=sheet_name or settings.SHEET_NAME)

    try:
        result = importer.import_bytes(content, file.filename)
    except ConfigurationError as e:
        logger.warning(f"Import of {file.filename} rejected, keeping previous model: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.message
        )
    except FileReadError as e:
        logger.warning(f"Could not read {file.filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Could not read {file.filename}: {e.message}"
        )

    service.load_model(result)

    return ImportResultResponse(
        message="File loaded. Parts and operators are ready.",
        source_name=file.filename,
        stats=ImportStats(**result.stats)
    )
