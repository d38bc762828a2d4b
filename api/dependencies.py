"""
Dependency injection utilities for FastAPI.

This module provides reusable dependencies for the live model store, the
services built on it, and upload checks.
"""

import logging
from pathlib import Path

from fastapi import Depends, HTTPException, Request, status

from api.config import settings
from services.model_store import ModelStore
from services.training_service import TrainingService
from services.view_service import ViewService

logger = logging.getLogger(__name__)


def get_store(request: Request) -> ModelStore:
    """
    Get the model store owned by the running application.

    Usage:
        @app.get("/endpoint")
        def endpoint(store: ModelStore = Depends(get_store)):
            model = store.model
    """
    return request.app.state.store


def get_training_service(store: ModelStore = Depends(get_store)) -> TrainingService:
    """Query/mutation service over the live model."""
    return TrainingService(store)


def get_view_service(store: ModelStore = Depends(get_store)) -> ViewService:
    """View service over the live model, using the configured page size."""
    return ViewService(store, page_size=settings.OPERATOR_PAGE_SIZE)


def verify_file_size(file_size: int) -> bool:
    """
    Verify uploaded file size is within limit.

    Args:
        file_size: File size in bytes

    Returns:
        True if size is acceptable

    Raises:
        HTTPException: If file is too large
    """
    max_size_bytes = settings.MAX_FILE_SIZE_MB * 1024 * 1024

    if file_size > max_size_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File size ({file_size / 1024 / 1024:.1f} MB) exceeds maximum allowed "
                   f"({settings.MAX_FILE_SIZE_MB} MB)"
        )

    return True


def verify_file_extension(filename: str) -> bool:
    """
    Verify file has allowed extension.

    Args:
        filename: Name of uploaded file

    Returns:
        True if extension is allowed

    Raises:
        HTTPException: If extension is not allowed
    """
    ext = Path(filename or '').suffix.lower()

    if ext not in [e.lower() for e in settings.ALLOWED_EXTENSIONS]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File extension '{ext}' not allowed. "
                   f"Allowed extensions: {', '.join(settings.ALLOWED_EXTENSIONS)}"
        )

    return True
