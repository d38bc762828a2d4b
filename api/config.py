"""
Application configuration using Pydantic Settings.

This module manages all configuration from environment variables.
"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings

from backend.models.training import LayoutConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Operator Training Matrix API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "REST API for looking up and editing operator training by part"
    API_PREFIX: str = "/api"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    RELOAD: bool = False

    # Spreadsheet layout (zero-based offsets)
    HEADER_ROW_INDEX: int = 12
    FIRST_DATA_ROW_INDEX: int = 13
    OPERATOR_COL_START: int = 16
    OPERATOR_COL_END: int = 38
    SHEET_NAME: Optional[str] = None  # Default: active sheet

    # Source file to load at startup (optional)
    SOURCE_FILE: Optional[str] = None

    # Views
    OPERATOR_PAGE_SIZE: int = 15

    # Upload Configuration
    MAX_FILE_SIZE_MB: int = 20
    ALLOWED_EXTENSIONS: List[str] = [".csv", ".xlsx", ".xlsm"]

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None  # Set to also log to a file
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    @property
    def layout(self) -> LayoutConfig:
        """Spreadsheet offsets as a LayoutConfig."""
        return LayoutConfig(
            header_row_index=self.HEADER_ROW_INDEX,
            first_data_row_index=self.FIRST_DATA_ROW_INDEX,
            operator_col_start=self.OPERATOR_COL_START,
            operator_col_end=self.OPERATOR_COL_END
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Create global settings instance
settings = get_settings()
