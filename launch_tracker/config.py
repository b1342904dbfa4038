"""
Configuration settings for the Launch Tracker backend
"""
import os
import sys
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

# Add project root to path to import global_config
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from global_config import *


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Redis Configuration
    redis_host: str = REDIS_HOST
    redis_port: int = REDIS_PORT
    redis_db: int = REDIS_DB
    redis_password: Optional[str] = REDIS_PASSWORD
    redis_shots_key: str = REDIS_SHOTS_KEY

    # Storage backend ("redis" or "file")
    store_backend: str = "redis"
    data_dir: str = DATA_DIR

    # Import heuristics
    header_scan_rows: int = HEADER_SCAN_ROWS
    min_matched_columns: int = MIN_MATCHED_COLUMNS
    min_carry_rows: int = MIN_CARRY_ROWS
    min_carry_row_fraction: float = MIN_CARRY_ROW_FRACTION

    # Statistics
    outlier_sigma: float = OUTLIER_SIGMA
    outlier_min_points: int = OUTLIER_MIN_POINTS
    gap_tight_yds: float = GAP_TIGHT_YDS
    gap_wide_yds: float = GAP_WIDE_YDS
    shape_straight_deg: float = SHAPE_STRAIGHT_DEG

    # Sample data
    sample_url: str = SAMPLE_URL
    sample_timeout: float = SAMPLE_TIMEOUT_SECONDS

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
