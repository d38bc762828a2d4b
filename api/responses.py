"""
Response helpers shared by the mutation endpoints.

Failed mutations keep the OperationResult body so clients can show the
message, and pick the HTTP status from the error class.
"""

from fastapi import status
from fastapi.responses import JSONResponse

from services.training_service import OperationResult

ERROR_STATUS = {
    'ValidationError': status.HTTP_400_BAD_REQUEST,
    'DuplicateError': status.HTTP_409_CONFLICT,
    'UnknownPartError': status.HTTP_404_NOT_FOUND,
    'UnknownOperatorError': status.HTTP_404_NOT_FOUND,
}


def result_response(result: OperationResult, success_status: int = status.HTTP_200_OK) -> JSONResponse:
    """Render an OperationResult with the status code matching its outcome."""
    if result.success:
        status_code = success_status
    else:
        status_code = ERROR_STATUS.get(result.error, status.HTTP_400_BAD_REQUEST)

    return JSONResponse(status_code=status_code, content=result.to_dict())
