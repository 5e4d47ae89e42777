"""
Application configuration using Pydantic Settings.
Storage credentials are required; the process refuses to start without them.
"""
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # S3-compatible storage (AWS S3, MinIO, Cloudflare R2, ...)
    s3_region: str = Field(..., min_length=1)
    s3_endpoint: str = Field(..., min_length=1)  # e.g., https://s3.example.com
    s3_bucket_name: str = Field(..., min_length=1)
    s3_access_key_id: str = Field(..., min_length=1)
    s3_secret_access_key: str = Field(..., min_length=1)
    s3_addressing_style: str = "path"  # MinIO and R2 use path-style

    # Environment
    environment: str = "dev"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        pydantic.ValidationError: If a required storage variable is missing
    """
    return Settings()
