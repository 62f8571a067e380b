"""
Configuration settings for the feedback board.

This module handles environment variable loading and configuration management
using Pydantic for validation and type safety.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Feedback board configuration settings.
    
    All settings can be overridden via environment variables.
    """
    
    # Issue Tracker API Configuration
    tracker_api_base_url: str = Field(
        default="https://api.github.com",
        description="Base URL for the issue tracker API"
    )
    tracker_owner: str = Field(
        default="",
        description="Owner of the repository that stores feedback"
    )
    tracker_repo: str = Field(
        default="",
        description="Repository that stores feedback"
    )
    tracker_token: Optional[str] = Field(
        default=None,
        description="Bearer token for the issue tracker API"
    )
    tracker_timeout: int = Field(
        default=30,
        description="Timeout in seconds for API requests"
    )
    tracker_page_size: int = Field(
        default=100,
        description="Number of issues requested per page"
    )
    tracker_max_pages: int = Field(
        default=10,
        description="Maximum number of pages followed when listing issues"
    )
    
    # Vote Ledger Configuration
    ledger_path: str = Field(
        default="data/voted_records.json",
        description="File holding the record numbers this device voted for"
    )
    verify_before_write: bool = Field(
        default=False,
        description="Re-fetch a record before writing a vote and fail if its body changed"
    )
    
    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="text",
        description="Logging format (json or text)"
    )
    debug_mode: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    
    class Config:
        """Pydantic configuration."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    
    Returns:
        Settings: Configured settings instance
    """
    return Settings()
