"""Shared configuration management for the reconciliation service.

Based on Pydantic Settings v2:
https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with the prefix 'APP_'.
    Example: APP_LOG_LEVEL=debug
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Service configuration
    service_name: str = Field(
        default="shipment-reconciliation",
        description="Service identifier for metrics and logs",
    )
    service_version: str = Field(
        default="0.1.0",
        description="Service version",
    )

    # Reconciliation rules
    weight_tolerance_kg: float = Field(
        default=0.001,
        ge=0,
        description="Maximum absolute difference (kg) for two weights to be considered equal",
    )

    # Document decoding
    invoice_encoding: str = Field(
        default="utf-8",
        description="Default text encoding for XML invoices",
    )
    lab_report_encoding: str = Field(
        default="utf-8",
        description="Text encoding for the CSV lab report",
    )

    # Upload limits (HTTP API)
    max_upload_bytes: int = Field(
        default=5 * 1024 * 1024,
        gt=0,
        description="Maximum size of a single uploaded document in bytes",
    )


def get_settings() -> Settings:
    """Factory function to get settings instance.

    Returns:
        Configured Settings instance
    """
    return Settings()
