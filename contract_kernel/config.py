"""
Contract Kernel Configuration

Pydantic-based settings with environment variable support.
"""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Settings(BaseSettings):
    """Settings loaded from CONTRACT_KERNEL_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CONTRACT_KERNEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ==========================================================================
    # CONTRACTS
    # ==========================================================================
    enabled: bool = True  # False: with_contract() calls straight through

    # ==========================================================================
    # REPORTING
    # ==========================================================================
    default_reporter: str = Field(default="console", description="console or logging")
    reporter_logger_name: str = "contract_kernel.report"

    # ==========================================================================
    # LOGGING
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Root level used by configure_logging()")


# Global settings instance
settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for applications and the demo entry point."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format=LOG_FORMAT,
    )
