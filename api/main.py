"""
FastAPI application for the operator training matrix.

This module creates and configures the FastAPI application, registering
all routers and middleware. The application owns exactly one ModelStore;
every request works against the model it currently holds.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import settings
from api.dependencies import get_store
from api.routers import import_router, models, operators, parts, trainings
from api.schemas.common import ErrorResponse, HealthCheckResponse
from backend.models.errors import ConfigurationError, FileReadError
from services.model_store import ModelStore
from services.training_import_service import TrainingImportService

# Configure logging
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format=settings.LOG_FORMAT,
    handlers=handlers
)

logger = logging.getLogger(__name__)


def preload_source_file(store: ModelStore):
    """Load SOURCE_FILE into the store, keeping the empty model if it fails."""
    if not settings.SOURCE_FILE:
        return

    importer = TrainingImportService(layout=settings.layout, sheet_name=settings.SHEET_NAME)
    try:
        result = importer.import_file(settings.SOURCE_FILE)
    except (ConfigurationError, FileReadError, OSError) as e:
        logger.error(f"Could not preload {settings.SOURCE_FILE}: {e}")
        return

    store.replace(result.model, result.stats)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.API_TITLE} v{settings.API_VERSION}")
    logger.info(
        f"Layout: header row {settings.HEADER_ROW_INDEX}, data from row {settings.FIRST_DATA_ROW_INDEX}, "
        f"operator columns {settings.OPERATOR_COL_START}-{settings.OPERATOR_COL_END}"
    )

    preload_source_file(app.state.store)

    yield

    # Shutdown
    logger.info("Shutting down application")


# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# The live model, owned by this application instance
app.state.store = ModelStore()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS
)


# Exception handlers

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail={"message": str(exc)} if settings.DEBUG else None,
            path=str(request.url)
        ).model_dump(mode='json')
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    """Handle 404 Not Found errors."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=ErrorResponse(
            error=getattr(exc, 'detail', None) or "Resource not found",
            detail={"path": str(request.url)},
            path=str(request.url)
        ).model_dump(mode='json')
    )


# Register routers with API prefix
app.include_router(import_router.router, prefix=settings.API_PREFIX)
app.include_router(models.router, prefix=settings.API_PREFIX)
app.include_router(operators.router, prefix=settings.API_PREFIX)
app.include_router(parts.router, prefix=settings.API_PREFIX)
app.include_router(trainings.router, prefix=settings.API_PREFIX)


# Root endpoints

@app.get('/', include_in_schema=False)
async def root():
    """
    Root endpoint - links to the docs.
    """
    return {
        'message': f'Welcome to {settings.API_TITLE}',
        'version': settings.API_VERSION,
        'docs': '/docs',
        'redoc': '/redoc',
        'openapi': '/openapi.json'
    }


@app.get('/health', response_model=HealthCheckResponse, tags=['health'])
async def health_check(store: ModelStore = Depends(get_store)):
    """
    Health check endpoint.

    Reports whether a training spreadsheet has been loaded. The service is
    "healthy" once a model is live and "degraded" before the first import.

    **Example:**
    ```bash
    curl http://localhost:8000/health
    ```
    """
    return HealthCheckResponse(
        status='healthy' if store.is_loaded else 'degraded',
        timestamp=datetime.utcnow(),
        version=settings.API_VERSION,
        model_loaded=store.is_loaded,
        source_name=store.model.source_name
    )


@app.get('/api/ping', tags=['health'])
async def ping():
    """
    Simple ping endpoint for load balancers.

    **Returns:**
    ```json
    {"ping": "pong"}
    ```
    """
    return {'ping': 'pong'}


# Middleware for request logging

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.info(f"{request.method} {request.url.path}")
    response = await call_next(request)
    logger.info(f"{request.method} {request.url.path} - {response.status_code}")
    return response


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(
        'api.main:app',
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL.lower()
    )
