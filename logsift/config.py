"""
Application configuration using Pydantic Settings.
Loads from LOGSIFT_* environment variables and .env file.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_prefix="LOGSIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
    
    # Application Settings
    app_name: str = "logsift"
    debug: bool = False
    log_level: str = "INFO"
    
    # Store
    database_path: str = ":memory:"
    table_name: str = "logs"
    
    # Ingestion
    sample_size: int = 100
    log_file: Optional[str] = None


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
