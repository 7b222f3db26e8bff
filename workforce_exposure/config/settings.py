"""
Settings module for Workforce Exposure.

Environment-based configuration with sensible defaults.
All settings can be overridden via ``WORKFORCE_EXPOSURE_*`` environment
variables or a ``.env`` file.
"""

import logging
import os
import sys
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The analytics limits mirror the constants used by the comparative
    dashboard; changing them changes every regenerated payload.
    """

    # Environment
    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)"
    )

    # Reference data
    catalog_path: Optional[str] = Field(
        default=None,
        description="Path to an occupational catalog JSON file (packaged catalog when unset)"
    )

    # Task mix
    usage_segment_total: int = Field(
        default=100,
        description="Total used when converting task-mix shares into integer segments"
    )

    # Workforce impact
    score_scale: float = Field(
        default=10.0,
        description="Multiplier applied to the summed exposure components"
    )

    # Comparative analytics
    high_risk_threshold: float = Field(
        default=6.0,
        description="Score at or above which a run counts as high risk in the heatmap"
    )
    max_top_tasks: int = Field(
        default=10,
        description="Number of tasks kept in the ranked task table"
    )
    max_sample_roles_per_task: int = Field(
        default=5,
        description="Sample role titles retained per task"
    )
    min_task_exposure: float = Field(
        default=1.0,
        description="Tasks with total exposure at or below this floor are dropped"
    )
    max_company_contributors: int = Field(
        default=8,
        description="Top contributing companies retained per task"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFORCE_EXPOSURE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are cached for performance. To reload, use:
        get_settings.cache_clear()
    """
    return Settings()


def load_settings_from_env(env_file: str = ".env") -> Settings:
    """Load settings from a specific env file."""
    if os.path.exists(env_file):
        from dotenv import load_dotenv
        load_dotenv(env_file)
    get_settings.cache_clear()
    return get_settings()


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings."""
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )
