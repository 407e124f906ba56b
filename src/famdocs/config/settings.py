"""
Runtime settings for famdocs.

Settings are read from the environment (prefix ``FAMDOCS_``) or a local
``.env`` file and cached for the lifetime of the process.
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DowngradePolicy, Headers, ValidationLimits


class FamdocsSettings(BaseSettings):
    """Settings for the document access layer."""

    model_config = SettingsConfigDict(
        env_prefix="FAMDOCS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Transport
    api_base_url: str = Field(default="http://localhost:8000/api", description="Document service base URL")
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request timeout")
    auth_token: Optional[str] = Field(default=None, description="Bearer token sent by the httpx transport")

    # Concurrency headers
    version_header: str = Field(default=Headers.ETAG)
    precondition_header: str = Field(default=Headers.IF_MATCH)

    # Sharing
    max_batch_size: int = Field(default=ValidationLimits.MAX_BATCH_SIZE, ge=1)
    bulk_downgrade_policy: DowngradePolicy = Field(default=DowngradePolicy.RETAIN)

    # Listing
    default_page_size: int = Field(default=ValidationLimits.DEFAULT_PAGE_SIZE, ge=1)
    max_page_size: int = Field(default=ValidationLimits.MAX_PAGE_SIZE, ge=1)

    @field_validator("max_batch_size")
    @classmethod
    def cap_batch_size(cls, value: int) -> int:
        # The backing store never accepts more than the hard cap.
        if value > ValidationLimits.MAX_BATCH_SIZE:
            raise ValueError(f"max_batch_size cannot exceed {ValidationLimits.MAX_BATCH_SIZE}")
        return value

    @field_validator("max_page_size")
    @classmethod
    def cap_page_size(cls, value: int) -> int:
        if value > ValidationLimits.MAX_PAGE_SIZE:
            raise ValueError(f"max_page_size cannot exceed {ValidationLimits.MAX_PAGE_SIZE}")
        return value


@lru_cache()
def get_settings() -> FamdocsSettings:
    """Get cached settings instance."""
    return FamdocsSettings()
