"""SDK settings using Pydantic Settings."""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

SDK_VERSION = "0.1.0"


def parse_comma_separated_list(v):
    """Parse comma-separated string into list."""
    if isinstance(v, str):
        return [item.strip() for item in v.split(",") if item.strip()]
    if isinstance(v, list):
        return v
    return []


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # SDK identity (reported as mint attributes)
    app_name: str = Field(default="uranium-sdk", alias="URANIUM_APP_NAME")
    app_version: str = Field(default=SDK_VERSION, alias="URANIUM_APP_VERSION")

    # API
    api_key: str = Field(default="", alias="URANIUM_API_KEY")
    base_url: str = Field(default="https://gw.urnm.pro", alias="URANIUM_BASE_URL")
    timeout: float = Field(default=20.0, gt=0, alias="URANIUM_TIMEOUT")
    device_id: Optional[str] = Field(default=None, alias="URANIUM_DEVICE_ID")
    debug: bool = Field(default=False, alias="URANIUM_DEBUG")

    # API-level retry (disabled unless asked for)
    retry_enabled: bool = Field(default=False, alias="URANIUM_RETRY_ENABLED")
    retry_max_retries: int = Field(default=3, ge=0, alias="URANIUM_RETRY_MAX_RETRIES")
    retry_delay: float = Field(default=1.0, ge=0, alias="URANIUM_RETRY_DELAY")
    retryable_statuses_str: str = Field(
        default="500,502,503,504",
        alias="URANIUM_RETRYABLE_STATUSES",
        exclude=True,
    )

    @property
    def retryable_statuses(self) -> List[int]:
        """Parse retryable HTTP statuses from comma-separated string."""
        return [int(code) for code in parse_comma_separated_list(self.retryable_statuses_str)]

    # Upload
    max_file_size_mb: int = Field(default=100, gt=0, alias="URANIUM_MAX_FILE_SIZE_MB")
    chunk_max_attempts: int = Field(default=3, ge=1, alias="URANIUM_CHUNK_MAX_ATTEMPTS")
    chunk_retry_base_delay: float = Field(
        default=1.0, ge=0, alias="URANIUM_CHUNK_RETRY_BASE_DELAY"
    )
    chunk_progress_slice_bytes: int = Field(
        default=64 * 1024, gt=0, alias="URANIUM_CHUNK_PROGRESS_SLICE_BYTES"
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def max_file_size_bytes(self) -> int:
        """Convert max file size from MB to bytes."""
        return self.max_file_size_mb * 1024 * 1024


# Global settings instance
settings = Settings()
